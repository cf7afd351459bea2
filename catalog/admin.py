from django.contrib import admin

from .models import Book


@admin.register(Book)
class BookAdmin(admin.ModelAdmin):
    list_display = ("title", "author", "category", "uploaded_by", "file_size", "upload_date")
    list_filter = ("category",)
    search_fields = ("title", "author", "isbn", "uploaded_by__email")
