import unittest

from debinstall.common.exception import (
    AuthorizationCheckError,
    AuthorizationError,
    BusConnectionError,
    DebinstallException,
    InstallError,
    PackageQueryError,
    PermissionDenied,
    SubjectConstructionError,
    TransactionRunError,
    describe_error,
)


class TestExceptions(unittest.TestCase):
    def test_default_messages(self):
        self.assertEqual(str(BusConnectionError()), "Could not connect to the system bus.")
        self.assertEqual(str(PermissionDenied()), "Operation not permitted by polkit.")
        self.assertEqual(str(TransactionRunError()), "Error running transaction.")
        self.assertEqual(str(DebinstallException()), "An unknown exception occurred.")

    def test_custom_message(self):
        self.assertEqual(str(SubjectConstructionError("invalid pid -1")), "invalid pid -1")

    def test_hierarchy(self):
        for exc in [SubjectConstructionError, AuthorizationCheckError, PermissionDenied]:
            self.assertTrue(issubclass(exc, AuthorizationError))
        self.assertTrue(issubclass(TransactionRunError, InstallError))
        for exc in [BusConnectionError, AuthorizationError, InstallError, PackageQueryError]:
            self.assertTrue(issubclass(exc, DebinstallException))
        self.assertFalse(issubclass(PermissionDenied, InstallError))

    def test_describe_error(self):
        self.assertEqual(describe_error(PermissionDenied()), "permission denied: Operation not permitted by polkit.")
        self.assertEqual(describe_error(ValueError("bad")), "error: bad")

    def test_describe_error_subclasses(self):
        class UnknownSubjectError(SubjectConstructionError):
            pass

        self.assertEqual(describe_error(AuthorizationError("no decision")), "authorization error: no decision")
        self.assertEqual(describe_error(UnknownSubjectError("no such pid")), "authorization error: no such pid")
        self.assertEqual(describe_error(TransactionRunError("failed")), "installation error: failed")
        self.assertEqual(describe_error(DebinstallException("other")), "error: other")

    def test_describe_error_with_cause(self):
        try:
            try:
                raise ConnectionRefusedError("connection refused")
            except ConnectionRefusedError as e:
                raise BusConnectionError() from e
        except BusConnectionError as e:
            self.assertEqual(
                describe_error(e), "connection error: Could not connect to the system bus. (connection refused)"
            )


if __name__ == "__main__":
    unittest.main()
