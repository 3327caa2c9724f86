"""
Tests for the email based User model and its manager
"""

from django.test import TestCase

from apps.users.models import User
from tests.factories.emall import TEST_PASSWORD, create_customer_user, create_merchant


class UserManagerTestCase(TestCase):
    """Test user creation through the custom manager"""

    def test_create_user_normalizes_email(self):
        user = User.objects.create_user(email='Shopper@EMALL.TEST', password=TEST_PASSWORD)

        self.assertEqual(user.email, 'Shopper@emall.test')
        self.assertEqual(user.role, 'customer')
        self.assertTrue(user.check_password(TEST_PASSWORD))

    def test_create_user_requires_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password=TEST_PASSWORD)

    def test_create_superuser(self):
        admin = User.objects.create_superuser(email='admin@emall.test', password=TEST_PASSWORD)

        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.is_superuser)
        self.assertEqual(admin.role, 'admin')

    def test_create_superuser_rejects_non_staff(self):
        with self.assertRaises(ValueError):
            User.objects.create_superuser(email='admin@emall.test', password=TEST_PASSWORD, is_staff=False)


class UserModelTestCase(TestCase):
    """Test display names and merchant profile access"""

    def test_full_name_falls_back_to_email(self):
        user = User.objects.create_user(email='anon@emall.test', password=TEST_PASSWORD)

        self.assertEqual(user.get_full_name(), 'anon@emall.test')
        self.assertEqual(str(user), 'anon@emall.test (anon@emall.test)')

    def test_customer_has_no_merchant_profile(self):
        customer = create_customer_user()

        self.assertFalse(customer.is_merchant)
        self.assertIsNone(customer.merchant)
        self.assertEqual(customer.get_full_name(), 'Mona Hassan')

    def test_merchant_profile(self):
        merchant = create_merchant()
        user = User.objects.get(pk=merchant.user.pk)

        self.assertTrue(user.is_merchant)
        self.assertEqual(user.merchant, merchant)
