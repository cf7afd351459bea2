from django.urls import path

from .views import review_create, review_delete, review_list

app_name = "reviews"

urlpatterns = [
    path("", review_list, name="list"),
    path("new/", review_create, name="create"),
    path("<int:pk>/delete/", review_delete, name="delete"),
]
