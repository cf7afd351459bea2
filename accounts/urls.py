from django.urls import path

from .views import (
    TextAssessLoginView,
    TextAssessLogoutView,
    signup,
    dashboard,
    profile_edit,
    profile_detail,
    admin_roles,
    admin_role_assign,
)

app_name = "accounts"

urlpatterns = [
    path("login/", TextAssessLoginView.as_view(), name="login"),
    path("logout/", TextAssessLogoutView.as_view(), name="logout"),
    path("signup/", signup, name="signup"),
    path("dashboard/", dashboard, name="dashboard"),
    path("profile/", profile_edit, name="profile"),
    path("users/<int:user_id>/", profile_detail, name="profile-detail"),
    path("admin/roles/", admin_roles, name="admin-roles"),
    path("admin/roles/<int:user_id>/", admin_role_assign, name="admin-role-assign"),
]
