"""Tests for secret-code authentication and authorization rules."""
import pytest

import security
from complaint_portal_modules.errors import AuthenticationFailed
from complaint_portal_modules.models import Complaint, User
from complaint_portal_modules.store import UserStore


@pytest.fixture
def users():
    store = UserStore()
    store.insert(User(id='1', secret_code='ADMIN123', name='Admin User',
                      email='admin@bugsmirror.com', is_admin=True))
    store.insert(User(id='2', secret_code='AAAA', name='Ann', email='a@b.com'))
    store.insert(User(id='3', secret_code='BBBB', name='Bob', email='b@b.com'))
    return store


def _complaint(owner_id):
    return Complaint(id='C9', title='Slow', summary='too slow', rating=5,
                     user_id=owner_id, user_name='whoever')


def test_authenticate_returns_matching_user(users):
    user = security.authenticate(users, 'AAAA')
    assert user.id == '2'
    assert user.name == 'Ann'


@pytest.mark.parametrize('code,message', [
    ('', 'secret code required'),
    (None, 'secret code required'),
    ('NOPE', 'invalid secret code'),
    ('aaaa', 'invalid secret code'),
])
def test_authenticate_rejects_bad_codes(users, code, message):
    with pytest.raises(AuthenticationFailed) as exc:
        security.authenticate(users, code)
    assert exc.value.message == message
    assert exc.value.status == 401
    assert exc.value.code == 'authentication_failed'


def test_is_admin(users):
    assert security.is_admin(users.find_by_code('ADMIN123'))
    assert not security.is_admin(users.find_by_code('AAAA'))


def test_owner_can_view_own_complaint(users):
    assert security.can_view(users.find_by_code('AAAA'), _complaint('2'))


def test_other_user_cannot_view(users):
    assert not security.can_view(users.find_by_code('BBBB'), _complaint('2'))


def test_admin_can_view_any_complaint(users):
    assert security.can_view(users.find_by_code('ADMIN123'), _complaint('2'))
