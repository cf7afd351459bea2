from django.urls import path

from .views import book_list, book_detail, book_submit, book_delete, book_download, admin_books

app_name = "catalog"

urlpatterns = [
    path("", book_list, name="list"),
    path("submit/", book_submit, name="submit"),
    path("admin/", admin_books, name="admin"),
    path("<int:pk>/", book_detail, name="detail"),
    path("<int:pk>/delete/", book_delete, name="delete"),
    path("<int:pk>/download/", book_download, name="download"),
]
