"""
Pytest tests for user administration and notifications
"""

import pytest

from helpers import register


class TestUsers:

    @pytest.fixture(autouse=True)
    def setup(self, client, admin_headers, user):
        self.client = client
        self.admin_headers = admin_headers
        self.user_id, self.headers = user
        self.admin_id = client.get("/api/auth/me", headers=admin_headers).json()["data"]["user"]["id"]

    def test_list_with_filters(self):
        register(self.client, "zed@example.com", first_name="Zed")

        everything = self.client.get("/api/users", headers=self.admin_headers)
        admins = self.client.get("/api/users", params={"role": "admin"}, headers=self.admin_headers)
        search = self.client.get("/api/users", params={"search": "zed"}, headers=self.admin_headers)

        assert everything.json()["data"]["pagination"]["total"] == 3
        assert [item["id"] for item in admins.json()["data"]["items"]] == [self.admin_id]
        assert [item["firstName"] for item in search.json()["data"]["items"]] == ["Zed"]

    def test_get_user(self):
        response = self.client.get(f"/api/users/{self.user_id}", headers=self.admin_headers)
        missing = self.client.get("/api/users/9999", headers=self.admin_headers)
        forbidden = self.client.get(f"/api/users/{self.user_id}", headers=self.headers)

        assert response.status_code == 200
        assert response.json()["data"]["user"]["email"] == "user@example.com"
        assert missing.status_code == 404
        assert forbidden.status_code == 403

    def test_statistics(self):
        other_id, _ = register(self.client, "zed@example.com", first_name="Zed")
        self.client.delete(f"/api/users/{other_id}", headers=self.admin_headers)

        response = self.client.get("/api/users/stats/overview", headers=self.admin_headers)

        assert response.status_code == 200
        assert response.json()["data"] == {
            "totalUsers": 3,
            "activeUsers": 2,
            "roleStats": [{"role": "admin", "count": 1}, {"role": "user", "count": 2}],
            "recentRegistrations": 3,
        }

    def test_statistics_are_admin_only(self):
        response = self.client.get("/api/users/stats/overview", headers=self.headers)

        assert response.status_code == 403

    def test_update_own_profile(self):
        response = self.client.put(
            "/api/users/profile", json={"firstName": "Umaira"}, headers=self.headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["user"]["firstName"] == "Umaira"
        assert response.json()["data"]["user"]["lastName"] == "User"

    def test_profile_update_cannot_change_role(self):
        response = self.client.put(
            "/api/users/profile", json={"role": "admin"}, headers=self.headers
        )
        me = self.client.get("/api/auth/me", headers=self.headers)

        assert response.status_code == 400
        assert me.json()["data"]["user"]["role"] == "user"

    def test_admin_promotes_user(self):
        response = self.client.put(
            f"/api/users/{self.user_id}", json={"role": "admin"}, headers=self.admin_headers
        )
        now_allowed = self.client.get("/api/users", headers=self.headers)

        assert response.json()["data"]["user"]["role"] == "admin"
        assert now_allowed.status_code == 200

    def test_admin_cannot_demote_self(self):
        response = self.client.put(
            f"/api/users/{self.admin_id}", json={"role": "user"}, headers=self.admin_headers
        )

        assert response.status_code == 400

    def test_deactivate(self):
        response = self.client.delete(f"/api/users/{self.user_id}", headers=self.admin_headers)
        listing = self.client.get("/api/users", headers=self.admin_headers)

        assert response.status_code == 200
        flags = {item["id"]: item["isActive"] for item in listing.json()["data"]["items"]}
        assert flags[self.user_id] is False

    def test_cannot_deactivate_self(self):
        response = self.client.delete(f"/api/users/{self.admin_id}", headers=self.admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot deactivate your own account"

    def test_unknown_user(self):
        response = self.client.delete("/api/users/9999", headers=self.admin_headers)

        assert response.status_code == 404


class TestNotifications:

    @pytest.fixture(autouse=True)
    def setup(self, client, admin_headers, user):
        self.client = client
        self.admin_headers = admin_headers
        self.user_id, self.headers = user

    def _notify(self, message, user_id=None, headers=None):
        return self.client.post(
            "/api/notify",
            json={"userId": user_id or self.user_id, "message": message},
            headers=headers or self.admin_headers,
        )

    def test_notify_and_list_newest_first(self):
        self._notify("First")
        self._notify("Second")

        response = self.client.get("/api/notifications", headers=self.headers)

        notifications = response.json()["data"]["notifications"]
        assert [item["message"] for item in notifications] == ["Second", "First"]
        assert all(item["isRead"] is False for item in notifications)

    def test_notify_is_admin_only(self):
        response = self._notify("Hello", headers=self.headers)

        assert response.status_code == 403

    def test_notify_unknown_user(self):
        response = self._notify("Hello", user_id=9999)

        assert response.status_code == 404

    def test_mark_read(self):
        self._notify("Hello")
        notification_id = self.client.get(
            "/api/notifications", headers=self.headers
        ).json()["data"]["notifications"][0]["id"]

        response = self.client.post(
            "/api/notifications/read", json={"notificationId": notification_id}, headers=self.headers
        )
        listing = self.client.get("/api/notifications", headers=self.headers)

        assert response.status_code == 200
        assert listing.json()["data"]["notifications"][0]["isRead"] is True

    def test_cannot_mark_someone_elses_notification(self):
        self._notify("Hello")
        notification_id = self.client.get(
            "/api/notifications", headers=self.headers
        ).json()["data"]["notifications"][0]["id"]
        _, other_headers = register(self.client, "other@example.com")

        response = self.client.post(
            "/api/notifications/read", json={"notificationId": notification_id}, headers=other_headers
        )

        assert response.status_code == 404
