from __future__ import annotations

import pytest
from django.contrib.auth import get_user_model
from django.test import Client

from accounts.models import Profile, Role, UserRole

User = get_user_model()


@pytest.mark.django_db
def test_signup_creates_account_profile_and_role(password):
    c = Client()
    r = c.post("/accounts/signup/", {
        "email": "New.Teacher@Example.com",
        "full_name": "New Teacher",
        "institution": "Uni",
        "role": Role.TEACHER,
        "password1": password,
        "password2": password,
    })
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/accounts/dashboard/")
    user = User.objects.get(email="new.teacher@example.com")
    assert user.username == "new.teacher@example.com"
    assert Profile.objects.get(user=user).institution == "Uni"
    assert list(UserRole.objects.filter(user=user).values_list("role", flat=True)) == [Role.TEACHER]


@pytest.mark.django_db
@pytest.mark.security
def test_signup_does_not_offer_admin(password):
    c = Client()
    r = c.post("/accounts/signup/", {
        "email": "sneaky@example.com",
        "full_name": "Sneaky",
        "role": Role.ADMIN,
        "password1": password,
        "password2": password,
    })
    assert r.status_code == 200
    assert not User.objects.filter(email="sneaky@example.com").exists()


@pytest.mark.django_db
def test_signup_rejects_duplicate_email(make_user, password):
    make_user(email="taken@example.com")
    c = Client()
    r = c.post("/accounts/signup/", {
        "email": "TAKEN@example.com",
        "full_name": "Again",
        "role": Role.STUDENT,
        "password1": password,
        "password2": password,
    })
    assert r.status_code == 200
    assert User.objects.filter(email__iexact="taken@example.com").count() == 1


@pytest.mark.django_db
def test_login_with_email_is_case_insensitive(make_user, password):
    make_user(email="casey@example.com")
    c = Client()
    r = c.post("/accounts/login/", {"username": "Casey@Example.com", "password": password})
    assert r.status_code == 302


@pytest.mark.django_db
def test_dashboard_shows_role_and_own_books(make_user, client_for):
    u = make_user(Role.TEACHER, full_name="Dana Teacher")
    r = client_for(u).get("/accounts/dashboard/")
    assert r.status_code == 200
    body = r.content.decode()
    assert "Dana Teacher" in body
    assert "Teacher" in body


@pytest.mark.django_db
def test_user_without_profile_is_sent_to_create_one(client_for):
    u = User.objects.create_user(username="bare@example.com", email="bare@example.com", password="x")
    c = client_for(u)
    r = c.get("/accounts/dashboard/")
    assert r.status_code == 302 and r.headers["Location"].endswith("/accounts/profile/")
    r = c.post("/accounts/profile/", {"full_name": "Bare Bones", "phone": "", "institution": ""})
    assert r.status_code == 302
    assert Profile.objects.get(user=u).email == "bare@example.com"


@pytest.mark.django_db
@pytest.mark.security
def test_profile_detail_visibility(make_user, client_for):
    s1 = make_user(Role.STUDENT)
    s2 = make_user(Role.STUDENT)
    t = make_user(Role.TEACHER)
    assert client_for(s1).get(f"/accounts/users/{s2.id}/").status_code == 403
    assert client_for(s1).get(f"/accounts/users/{s1.id}/").status_code == 200
    assert client_for(t).get(f"/accounts/users/{s2.id}/").status_code == 200
    assert client_for(t).get("/accounts/users/999999/").status_code == 404


@pytest.mark.django_db
@pytest.mark.security
def test_admin_panel_is_admin_only(make_user, client_for):
    student = make_user(Role.STUDENT)
    teacher = make_user(Role.TEACHER)
    admin = make_user(Role.ADMIN)
    assert client_for(student).get("/accounts/admin/roles/").status_code == 403
    assert client_for(teacher).get("/accounts/admin/roles/").status_code == 403
    r = client_for(admin).get("/accounts/admin/roles/")
    assert r.status_code == 200
    assert student.email in r.content.decode()
    anon = Client().get("/accounts/admin/roles/")
    assert anon.status_code == 302


@pytest.mark.django_db
def test_admin_assigns_role_through_the_panel(make_user, client_for):
    admin = make_user(Role.ADMIN)
    student = make_user(Role.STUDENT)
    c = client_for(admin)
    r = c.post(f"/accounts/admin/roles/{student.id}/", {"role": Role.TEACHER})
    assert r.status_code == 302
    assert list(UserRole.objects.filter(user=student).values_list("role", flat=True)) == [Role.TEACHER]

    # Own role stays put and the admin is told why
    r = c.post(f"/accounts/admin/roles/{admin.id}/", {"role": Role.STUDENT}, follow=True)
    assert "You cannot change your own role." in r.content.decode()
    assert list(UserRole.objects.filter(user=admin).values_list("role", flat=True)) == [Role.ADMIN]
