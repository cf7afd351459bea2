from django.urls import path

from .views import compose, inbox, message_detail, message_mark_read, unread

app_name = "messaging"

urlpatterns = [
    path("", inbox, name="inbox"),
    path("compose/", compose, name="compose"),
    path("unread/", unread, name="unread"),
    path("<int:pk>/", message_detail, name="detail"),
    path("<int:pk>/read/", message_mark_read, name="mark-read"),
]
