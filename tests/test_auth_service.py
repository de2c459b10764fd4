"""Tests for dashboard sign-in."""

import unittest
from unittest.mock import MagicMock

import requests

from pitchpro.auth.services import AuthService, AuthUser, auth_error_message
from pitchpro.errors import AccessDeniedError, AuthenticationError

ACCESS_URL = "https://example.cloudfunctions.net/checkDashboardAccess"


def response(body, status_code=200):
    mock_response = MagicMock()
    mock_response.status_code = status_code
    mock_response.ok = status_code < 400
    mock_response.json.return_value = body
    return mock_response


GRANTED = response({"result": {"status": "Success", "message": "ok"}})
SIGNED_IN = response(
    {
        "localId": "uid1",
        "email": "owner@example.com",
        "displayName": "Owner",
        "idToken": "token",
        "refreshToken": "refresh",
    }
)


class AuthServiceTestCase(unittest.TestCase):
    def setUp(self):
        self.http = MagicMock()
        self.service = AuthService("API_KEY", ACCESS_URL, http=self.http)

    def test_login_checks_access_then_signs_in(self):
        self.http.post.side_effect = [GRANTED, SIGNED_IN]
        user = self.service.login("owner@example.com", "secret")

        self.assertEqual(user.uid, "uid1")
        self.assertEqual(self.service.get_current_user(), user)
        access_call, sign_in_call = self.http.post.call_args_list
        self.assertEqual(access_call.args[0], ACCESS_URL)
        self.assertEqual(
            access_call.kwargs["json"], {"data": {"email": "owner@example.com"}}
        )
        self.assertTrue(sign_in_call.args[0].endswith("accounts:signInWithPassword"))
        self.assertEqual(sign_in_call.kwargs["params"], {"key": "API_KEY"})

    def test_access_denied_carries_function_message(self):
        self.http.post.return_value = response(
            {"result": {"status": "Failed", "message": "You are not a pitch owner"}}
        )
        with self.assertRaises(AccessDeniedError) as cm:
            self.service.login("player@example.com", "secret")
        self.assertEqual(cm.exception.message, "You are not a pitch owner")
        self.assertEqual(cm.exception.status_code, 403)
        self.assertEqual(self.http.post.call_count, 1)

    def test_access_denied_without_message(self):
        self.http.post.return_value = response({"result": {"status": "Failed"}})
        with self.assertRaises(AccessDeniedError) as cm:
            self.service.login("player@example.com", "secret")
        self.assertEqual(cm.exception.message, "Access denied")

    def test_credential_errors_are_mapped(self):
        cases = {
            "EMAIL_NOT_FOUND": "User not found",
            "INVALID_PASSWORD": "Invalid password",
            "INVALID_EMAIL": "Invalid email format",
            "TOO_MANY_ATTEMPTS_TRY_LATER : Access disabled": (
                "Too many failed attempts. Please try again later"
            ),
        }
        for code, message in cases.items():
            with self.subTest(code=code):
                self.http.post.side_effect = [
                    GRANTED,
                    response({"error": {"message": code}}, status_code=400),
                ]
                with self.assertRaises(AuthenticationError) as cm:
                    self.service.login("owner@example.com", "wrong")
                self.assertEqual(cm.exception.message, message)
                self.assertEqual(cm.exception.status_code, 401)

    def test_network_error(self):
        self.http.post.side_effect = requests.ConnectionError("offline")
        with self.assertRaises(AuthenticationError) as cm:
            self.service.login("owner@example.com", "secret")
        self.assertEqual(
            cm.exception.message, "Network error. Please check your connection"
        )

    def test_access_check_server_error(self):
        self.http.post.return_value = response(
            {"error": {"status": "INTERNAL", "message": "INTERNAL"}}, status_code=500
        )
        with self.assertRaises(AuthenticationError) as cm:
            self.service.check_user_access("owner@example.com")
        self.assertEqual(cm.exception.message, "Server error. Please try again later.")

    def test_check_user_access_returns_result(self):
        self.http.post.return_value = GRANTED
        self.assertEqual(
            self.service.check_user_access("owner@example.com"),
            {"status": "Success", "message": "ok"},
        )

    def test_auth_state_listeners(self):
        seen = []
        unsubscribe = self.service.on_auth_state_change(seen.append)
        self.http.post.side_effect = [GRANTED, SIGNED_IN]
        user = self.service.login("owner@example.com", "secret")
        self.service.logout()
        unsubscribe()
        self.service._set_current_user(user)

        self.assertEqual(seen, [None, user, None])
        self.assertIsNone(AuthService("k").get_current_user())

    def test_reset_password(self):
        self.http.post.return_value = response({"email": "owner@example.com"})
        self.service.reset_password("owner@example.com")
        call = self.http.post.call_args
        self.assertTrue(call.args[0].endswith("accounts:sendOobCode"))
        self.assertEqual(
            call.kwargs["json"],
            {"requestType": "PASSWORD_RESET", "email": "owner@example.com"},
        )


class AuthHelpersTestCase(unittest.TestCase):
    def test_unknown_code(self):
        self.assertEqual(auth_error_message("WEIRD"), "Login failed. Please try again.")

    def test_user_from_session(self):
        self.assertIsNone(AuthUser.from_session({}))
        user = AuthUser.from_session({"user_id": "u1", "email": "a@example.com"})
        self.assertEqual(user.to_dict()["email"], "a@example.com")


if __name__ == "__main__":
    unittest.main()
