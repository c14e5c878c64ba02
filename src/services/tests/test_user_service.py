"""Unit tests for user_service use cases."""

import unittest
from unittest.mock import MagicMock, patch

import bcrypt

from adapter.memory.user_repository import InMemoryUserRepository
from domain.model.errors import ErrorCode
from domain.model.user import CreateUserParams, UpdateUserParams, UserFilters
from services.user_service import (
    ListUsersRequest,
    create_user,
    delete_user,
    get_user,
    list_users,
    update_user,
)


class TestCreateUser(unittest.TestCase):

    def setUp(self):
        self.repo = InMemoryUserRepository()

    def test_create_user_success(self):
        result = create_user(self.repo, CreateUserParams(email='a@x.com', name='Ann'))

        self.assertTrue(result.success)
        self.assertIsNone(result.error)
        self.assertEqual(result.data.email, 'a@x.com')
        self.assertEqual(self.repo.find_by_email('a@x.com').id, result.data.id)

    def test_duplicate_email_is_a_conflict(self):
        """Second create with the same email is rejected, not overwritten."""
        first = create_user(self.repo, CreateUserParams(email='a@x.com', name='Ann'))
        second = create_user(self.repo, CreateUserParams(email='a@x.com', name='Bob'))

        self.assertTrue(first.success)
        self.assertFalse(second.success)
        self.assertEqual(second.error.code, ErrorCode.EMAIL_CONFLICT)
        self.assertEqual(self.repo.find_by_email('a@x.com').name, 'Ann')
        self.assertEqual(len(self.repo.find_all()), 1)

    def test_invalid_email(self):
        for email in ('invalid-email', 'a@b', 'a b@x.com', ''):
            result = create_user(self.repo, CreateUserParams(email=email, name='Ann'))
            self.assertFalse(result.success, email)
            self.assertEqual(result.error.code, ErrorCode.VALIDATION_ERROR)
            self.assertEqual(result.error.message, 'Invalid email format')

    def test_name_length_bounds(self):
        self.assertFalse(create_user(self.repo, CreateUserParams(email='a@x.com', name='A')).success)
        self.assertFalse(create_user(self.repo, CreateUserParams(email='b@x.com', name='A' * 101)).success)
        self.assertTrue(create_user(self.repo, CreateUserParams(email='c@x.com', name='Al')).success)
        self.assertTrue(create_user(self.repo, CreateUserParams(email='d@x.com', name='A' * 100)).success)

    @patch('services.user_service.BCRYPT_ROUNDS', 4)
    def test_password_is_hashed(self):
        result = create_user(self.repo, CreateUserParams(email='a@x.com', name='Ann', password='password123'))

        self.assertTrue(result.success)
        stored = self.repo.find_by_id(result.data.id)
        self.assertNotEqual(stored.password_hash, 'password123')
        self.assertTrue(bcrypt.checkpw(b'password123', stored.password_hash.encode('utf-8')))

    def test_short_password_rejected(self):
        result = create_user(self.repo, CreateUserParams(email='a@x.com', name='Ann', password='short'))

        self.assertFalse(result.success)
        self.assertEqual(result.error.code, ErrorCode.VALIDATION_ERROR)
        self.assertEqual(self.repo.find_all(), [])

    @patch('services.user_service.BCRYPT_ROUNDS', 4)
    def test_password_at_bcrypt_byte_limit_is_accepted(self):
        result = create_user(self.repo, CreateUserParams(email='a@x.com', name='Ann', password='p' * 72))

        self.assertTrue(result.success)
        stored = self.repo.find_by_id(result.data.id)
        self.assertTrue(bcrypt.checkpw(b'p' * 72, stored.password_hash.encode('utf-8')))

    def test_password_over_bcrypt_byte_limit_rejected(self):
        # 37 two-byte characters are 74 bytes
        for password in ('p' * 73, 'p' * 80, 'é' * 37):
            result = create_user(self.repo, CreateUserParams(email='a@x.com', name='Ann', password=password))
            self.assertFalse(result.success)
            self.assertEqual(result.error.code, ErrorCode.VALIDATION_ERROR)
            self.assertEqual(result.error.message, 'Password must be at most 72 bytes')

        self.assertEqual(self.repo.find_all(), [])

    def test_repository_failure_becomes_internal_error(self):
        mock_repo = MagicMock()
        mock_repo.find_by_email.return_value = None
        mock_repo.create.side_effect = RuntimeError("connection reset")

        with self.assertLogs('services.use_case', level='ERROR'):
            result = create_user(mock_repo, CreateUserParams(email='a@x.com', name='Ann'))

        self.assertFalse(result.success)
        self.assertEqual(result.error.code, ErrorCode.INTERNAL_ERROR)
        self.assertEqual(result.error.message, 'Failed to create user')


class TestGetUser(unittest.TestCase):

    def setUp(self):
        self.repo = InMemoryUserRepository()

    def test_get_existing(self):
        user = self.repo.create(CreateUserParams(email='a@x.com', name='Ann'))

        result = get_user(self.repo, user.id)

        self.assertTrue(result.success)
        self.assertEqual(result.data, user)

    def test_get_missing(self):
        result = get_user(self.repo, 'missing')

        self.assertFalse(result.success)
        self.assertEqual(result.error.code, ErrorCode.USER_NOT_FOUND)
        self.assertEqual(result.error.message, 'User not found')

    def test_store_failure(self):
        mock_repo = MagicMock()
        mock_repo.find_by_id.side_effect = RuntimeError("boom")

        with self.assertLogs('services.use_case', level='ERROR'):
            result = get_user(mock_repo, 'abc')

        self.assertEqual(result.error.code, ErrorCode.INTERNAL_ERROR)


class TestUpdateUser(unittest.TestCase):

    def setUp(self):
        self.repo = InMemoryUserRepository()
        self.ann = self.repo.create(CreateUserParams(email='ann@x.com', name='Ann'))
        self.bob = self.repo.create(CreateUserParams(email='bob@x.com', name='Bob'))

    def test_update_success(self):
        result = update_user(self.repo, self.ann.id, UpdateUserParams(name='Annie', is_active=False))

        self.assertTrue(result.success)
        self.assertEqual(result.data.name, 'Annie')
        self.assertFalse(result.data.is_active)
        self.assertEqual(result.data.email, 'ann@x.com')

    def test_update_missing_user(self):
        result = update_user(self.repo, 'missing', UpdateUserParams(name='Nobody'))
        self.assertEqual(result.error.code, ErrorCode.USER_NOT_FOUND)

    def test_email_taken_by_another_user(self):
        result = update_user(self.repo, self.ann.id, UpdateUserParams(email='bob@x.com'))

        self.assertEqual(result.error.code, ErrorCode.EMAIL_CONFLICT)
        self.assertEqual(self.repo.find_by_id(self.ann.id).email, 'ann@x.com')

    def test_keeping_own_email_is_not_a_conflict(self):
        result = update_user(self.repo, self.ann.id, UpdateUserParams(email='ann@x.com'))
        self.assertTrue(result.success)

    def test_invalid_fields(self):
        bad_email = update_user(self.repo, self.ann.id, UpdateUserParams(email='nope'))
        bad_name = update_user(self.repo, self.ann.id, UpdateUserParams(name='A'))

        self.assertEqual(bad_email.error.code, ErrorCode.VALIDATION_ERROR)
        self.assertEqual(bad_name.error.code, ErrorCode.VALIDATION_ERROR)

    def test_user_vanishes_between_check_and_update(self):
        mock_repo = MagicMock()
        mock_repo.find_by_id.return_value = self.ann
        mock_repo.update.return_value = None

        result = update_user(mock_repo, self.ann.id, UpdateUserParams(name='Annie'))

        self.assertEqual(result.error.code, ErrorCode.USER_NOT_FOUND)


class TestDeleteUser(unittest.TestCase):

    def setUp(self):
        self.repo = InMemoryUserRepository()

    def test_delete_success(self):
        user = self.repo.create(CreateUserParams(email='a@x.com', name='Ann'))

        result = delete_user(self.repo, user.id)

        self.assertTrue(result.success)
        self.assertIsNone(result.data)
        self.assertIsNone(self.repo.find_by_id(user.id))

    def test_delete_missing(self):
        result = delete_user(self.repo, 'missing')
        self.assertEqual(result.error.code, ErrorCode.USER_NOT_FOUND)

    def test_delete_lost_race(self):
        user = self.repo.create(CreateUserParams(email='a@x.com', name='Ann'))
        mock_repo = MagicMock()
        mock_repo.find_by_id.return_value = user
        mock_repo.delete.return_value = False

        result = delete_user(mock_repo, user.id)

        self.assertEqual(result.error.code, ErrorCode.USER_NOT_FOUND)


class TestListUsers(unittest.TestCase):

    def setUp(self):
        self.repo = InMemoryUserRepository()
        self.users = [
            self.repo.create(CreateUserParams(email=f'user{i:02d}@x.com', name=f'User {i:02d}'))
            for i in range(1, 26)
        ]
        self.repo.update(self.users[0].id, UpdateUserParams(is_active=False))

    def test_paginated(self):
        result = list_users(self.repo, ListUsersRequest(page=2, limit=10, sort_by='createdAt', sort_order='desc'))

        self.assertTrue(result.success)
        newest_first = [u.id for u in reversed(self.users)]
        self.assertEqual([u.id for u in result.data.data], newest_first[10:20])
        self.assertEqual(result.data.meta.total, 25)
        self.assertEqual(result.data.meta.total_pages, 3)

    def test_filters_bypass_pagination(self):
        """With filters, page/limit/sort are ignored and one page is reported."""
        request = ListUsersRequest(page=3, limit=2, sort_by='name', sort_order='asc', filters=UserFilters(is_active=True))

        result = list_users(self.repo, request)

        self.assertTrue(result.success)
        self.assertEqual(len(result.data.data), 24)
        self.assertEqual(result.data.data[0].id, self.users[-1].id)
        self.assertEqual(result.data.meta.page, 1)
        self.assertEqual(result.data.meta.limit, 24)
        self.assertEqual(result.data.meta.total, 24)
        self.assertEqual(result.data.meta.total_pages, 1)

    def test_filters_compose_when_enabled(self):
        request = ListUsersRequest(page=3, limit=10, sort_by='name', sort_order='asc', filters=UserFilters(is_active=True))

        result = list_users(self.repo, request, compose_filters=True)

        self.assertEqual(result.data.meta.total, 24)
        self.assertEqual(result.data.meta.total_pages, 3)
        self.assertEqual([u.name for u in result.data.data], [f'User {i:02d}' for i in range(22, 26)])

    def test_empty_filters_paginate(self):
        result = list_users(self.repo, ListUsersRequest(page=1, limit=5, filters=UserFilters()))
        self.assertEqual(result.data.meta.total_pages, 5)

    def test_page_and_limit_validation(self):
        for request in (ListUsersRequest(page=0), ListUsersRequest(limit=0), ListUsersRequest(limit=101)):
            result = list_users(self.repo, request)
            self.assertFalse(result.success)
            self.assertEqual(result.error.code, ErrorCode.VALIDATION_ERROR)

    def test_limit_bounds_are_inclusive(self):
        self.assertTrue(list_users(self.repo, ListUsersRequest(limit=1)).success)
        self.assertTrue(list_users(self.repo, ListUsersRequest(limit=100)).success)

    def test_store_failure(self):
        mock_repo = MagicMock()
        mock_repo.find_with_pagination.side_effect = RuntimeError("timeout")

        with self.assertLogs('services.use_case', level='ERROR'):
            result = list_users(mock_repo, ListUsersRequest())

        self.assertEqual(result.error.code, ErrorCode.INTERNAL_ERROR)
        self.assertEqual(result.error.message, 'Failed to list users')


if __name__ == '__main__':
    unittest.main()
