from django.test import SimpleTestCase, override_settings
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.test import APIRequestFactory

from floor.exceptions import TableHasOpenOrders
from .authentication import APIKeyAuthentication
from .exceptions import pos_exception_handler
from .permissions import StaffRolePermission


class RoleView:
    allowed_roles = ('cashier',)


class AuthenticationTests(SimpleTestCase):

    def setUp(self):
        self.factory = APIRequestFactory()
        self.auth = APIKeyAuthentication()

    @override_settings(API_KEY='secret')
    def test_valid_key(self):
        request = self.factory.get('/', HTTP_X_API_KEY='secret')
        self.assertEqual(self.auth.authenticate(request), (None, 'secret'))

    @override_settings(API_KEY='secret')
    def test_wrong_key(self):
        request = self.factory.get('/', HTTP_X_API_KEY='guess')
        with self.assertRaises(AuthenticationFailed):
            self.auth.authenticate(request)

    def test_missing_key(self):
        self.assertIsNone(self.auth.authenticate(self.factory.get('/')))


class StaffRolePermissionTests(SimpleTestCase):

    def setUp(self):
        self.factory = APIRequestFactory()
        self.permission = StaffRolePermission()

    def check(self, method, role=None, view=None):
        headers = {'HTTP_X_STAFF_ROLE': role} if role else {}
        request = getattr(self.factory, method)('/', **headers)
        return self.permission.has_permission(request, view or RoleView())

    def test_reads_are_open(self):
        self.assertTrue(self.check('get'))

    def test_writes_need_allowed_role(self):
        self.assertTrue(self.check('post', 'cashier'))
        self.assertTrue(self.check('post', 'Admin'))
        self.assertFalse(self.check('post', 'waiter'))
        self.assertFalse(self.check('post'))
        self.assertFalse(self.check('post', 'owner'))

    def test_views_without_roles(self):
        self.assertTrue(self.check('post', view=object()))


class ExceptionHandlerTests(SimpleTestCase):

    def test_pos_error_rendered(self):
        exc = TableHasOpenOrders('Table 3 still has unpaid orders', table_id=3, order_ids=[7])

        response = pos_exception_handler(exc, {'view': None})

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data, {
            'error': 'Table 3 still has unpaid orders',
            'code': 'table_has_open_orders',
            'table_id': 3,
            'order_ids': [7],
        })

    def test_other_errors_fall_through(self):
        response = pos_exception_handler(AuthenticationFailed('nope'), {'view': None})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
