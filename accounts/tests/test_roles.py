from __future__ import annotations

import pytest
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.management import CommandError, call_command

from accounts.models import Profile, Role, UserRole
from accounts.services import reassign_role, role_counts, directory
from policy.exceptions import AuthorizationDenied, SelfRoleChange

User = get_user_model()


@pytest.mark.django_db
def test_register_assigns_the_chosen_role_once(make_user):
    u = make_user(Role.TEACHER)
    assert list(UserRole.objects.filter(user=u).values_list("role", flat=True)) == [Role.TEACHER]
    # Saving the profile again does not add a second role row
    profile = u.profile
    profile.full_name = "Renamed"
    profile.save()
    assert UserRole.objects.filter(user=u).count() == 1


@pytest.mark.django_db
def test_profile_created_later_defaults_to_student():
    u = User.objects.create_user(username="late@example.com", email="late@example.com", password="x")
    assert not UserRole.objects.filter(user=u).exists()
    Profile.objects.create(user=u, full_name="Late", email=u.email)
    assert list(UserRole.objects.filter(user=u).values_list("role", flat=True)) == [Role.STUDENT]


@pytest.mark.django_db
def test_admin_reassigns_student_to_teacher_leaving_one_row(make_user, actor_of):
    admin = make_user(Role.ADMIN)
    student = make_user(Role.STUDENT)
    row = reassign_role(actor_of(admin), student.id, Role.TEACHER)
    assert row.role == Role.TEACHER
    rows = list(UserRole.objects.filter(user=student).values_list("role", flat=True))
    assert rows == [Role.TEACHER]
    assert actor_of(student).role == Role.TEACHER


@pytest.mark.django_db
@pytest.mark.security
def test_self_role_change_is_rejected_before_any_query(make_user, actor_of, django_assert_num_queries):
    admin = make_user(Role.ADMIN)
    actor = actor_of(admin)
    with django_assert_num_queries(0):
        with pytest.raises(SelfRoleChange):
            reassign_role(actor, admin.id, Role.STUDENT)
    assert list(UserRole.objects.filter(user=admin).values_list("role", flat=True)) == [Role.ADMIN]


@pytest.mark.django_db
@pytest.mark.security
def test_non_admin_cannot_reassign_roles(make_user, actor_of):
    teacher = make_user(Role.TEACHER)
    student = make_user(Role.STUDENT)
    with pytest.raises(AuthorizationDenied):
        reassign_role(actor_of(teacher), student.id, Role.ADMIN)
    assert list(UserRole.objects.filter(user=student).values_list("role", flat=True)) == [Role.STUDENT]


@pytest.mark.django_db
@pytest.mark.security
def test_non_admin_is_denied_before_user_lookup(make_user, actor_of):
    teacher = make_user(Role.TEACHER)
    with pytest.raises(AuthorizationDenied):
        reassign_role(actor_of(teacher), 999_999, Role.ADMIN)
    with pytest.raises(AuthorizationDenied):
        reassign_role(actor_of(teacher), 999_999, "principal")


@pytest.mark.django_db
def test_reassign_rejects_unknown_role_and_user(make_user, actor_of):
    admin = make_user(Role.ADMIN)
    student = make_user(Role.STUDENT)
    with pytest.raises(ValidationError):
        reassign_role(actor_of(admin), student.id, "principal")
    with pytest.raises(ValidationError):
        reassign_role(actor_of(admin), 999_999, Role.TEACHER)


@pytest.mark.django_db
def test_directory_search_and_counts(make_user, actor_of):
    admin = make_user(Role.ADMIN, full_name="Ada Admin")
    make_user(Role.TEACHER, full_name="Tess Teacher")
    make_user(Role.STUDENT, full_name="Sam Student")
    make_user(Role.STUDENT, full_name="Sue Student")
    actor = actor_of(admin)
    assert role_counts(actor) == {Role.STUDENT: 2, Role.TEACHER: 1, Role.ADMIN: 1}
    assert [p.full_name for p in directory(actor, "tess")] == ["Tess Teacher"]
    assert {p.full_name for p in directory(actor, "student")} == {"Sam Student", "Sue Student"}


@pytest.mark.django_db
def test_promote_admin_command(make_user):
    u = make_user(Role.STUDENT, email="boss@example.com")
    call_command("promote_admin", "BOSS@example.com")
    assert list(UserRole.objects.filter(user=u).values_list("role", flat=True)) == [Role.ADMIN]
    with pytest.raises(CommandError):
        call_command("promote_admin", "nobody@example.com")
