# -*- coding: utf-8 -*-

from __future__ import annotations

import os
import shutil
import sys
import tempfile
import unittest
from datetime import datetime, timedelta
from pathlib import Path
from unittest import mock
from uuid import uuid4

from fastapi.testclient import TestClient

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-password"


class TestApiFlow(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="tracker-test-"))
        data_root = cls._tmp / "data"
        os.environ["TRACKER_DATA_ROOT"] = str(data_root)
        os.environ["TRACKER_DB_PATH"] = str(data_root / "tracker.db")
        os.environ["TRACKER_UPLOADS_DIR"] = str(data_root / "uploads")
        os.environ["TRACKER_JWT_SECRET"] = "test-secret"
        os.environ["TRACKER_ADMIN_EMAIL"] = ADMIN_EMAIL
        os.environ["TRACKER_ADMIN_PASSWORD"] = ADMIN_PASSWORD
        os.environ["GEMINI_API_KEY"] = "test-key"

        # Ensure settings/app reflect the env vars above.
        for name in list(sys.modules.keys()):
            if name == "calorie_backend" or name.startswith("calorie_backend."):
                sys.modules.pop(name, None)

        from calorie_backend.api import app  # noqa: WPS433 (import inside test for env control)

        cls.client = TestClient(app)
        cls.uploads_dir = data_root / "uploads"

    @classmethod
    def tearDownClass(cls) -> None:
        cls.client.close()
        for key in (
            "TRACKER_DATA_ROOT",
            "TRACKER_DB_PATH",
            "TRACKER_UPLOADS_DIR",
            "TRACKER_JWT_SECRET",
            "TRACKER_ADMIN_EMAIL",
            "TRACKER_ADMIN_PASSWORD",
            "GEMINI_API_KEY",
        ):
            os.environ.pop(key, None)
        shutil.rmtree(cls._tmp, ignore_errors=True)

    # ---- helpers ----

    def _login(self, email: str, password: str):
        return self.client.post("/api/login", json={"email": email, "password": password})

    def _admin_headers(self) -> dict:
        resp = self._login(ADMIN_EMAIL, ADMIN_PASSWORD)
        self.assertEqual(resp.status_code, 200, resp.text)
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    def _register(self, email: str, password: str = "secret-pass", **overrides):
        form = {
            "name": "Test User",
            "email": email,
            "password": password,
            "height": "172",
            "weight": "65",
            "bodyType": "Lean",
            "goal": "Weight Gain",
        }
        form.update(overrides)
        return self.client.post("/api/register", data=form)

    def _approved_user_headers(self) -> dict:
        email = f"user-{uuid4().hex[:8]}@example.com"
        self.assertEqual(self._register(email).status_code, 201)
        pending = self.client.get("/api/admin/pending-users", headers=self._admin_headers()).json()
        user_id = next(u["id"] for u in pending if u["email"] == email)
        resp = self.client.patch(
            f"/api/admin/users/{user_id}/approval",
            json={"action": "approve"},
            headers=self._admin_headers(),
        )
        self.assertEqual(resp.status_code, 200)
        login = self._login(email, "secret-pass")
        self.assertEqual(login.status_code, 200, login.text)
        return {"Authorization": f"Bearer {login.json()['token']}"}

    # ---- tests ----

    def test_health_is_public(self) -> None:
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})

    def test_auth_required(self) -> None:
        resp = self.client.get("/api/food-entries/today")
        self.assertEqual(resp.status_code, 401)
        resp = self.client.get("/api/profile", headers={"Authorization": "Bearer not-a-token"})
        self.assertEqual(resp.status_code, 403)

    def test_registration_requires_approval(self) -> None:
        email = f"pending-{uuid4().hex[:8]}@example.com"
        resp = self._register(email, weight="71", goal="Weight Loss", bodyType="Normal")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json(), {"message": "User registered successfully. Awaiting admin approval."})

        self.assertEqual(self._register(email).status_code, 400)

        resp = self._login(email, "secret-pass")
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["detail"], "Awaiting admin approval")

        resp = self._login(email, "wrong")
        self.assertEqual(resp.status_code, 400)

        pending = self.client.get("/api/admin/pending-users", headers=self._admin_headers()).json()
        row = next(u for u in pending if u["email"] == email)
        self.assertEqual(row["body_type"], "Normal")
        self.assertEqual(row["goal"], "Weight Loss")

        resp = self.client.patch(
            f"/api/admin/users/{row['id']}/approval",
            json={"action": "approve"},
            headers=self._admin_headers(),
        )
        self.assertEqual(resp.status_code, 200)

        resp = self._login(email, "secret-pass")
        self.assertEqual(resp.status_code, 200)
        user = resp.json()["user"]
        self.assertFalse(user["isAdmin"])
        self.assertEqual(user["dailyCalorieGoal"], 2000)
        self.assertEqual(user["dailyProteinGoal"], 114)

    def test_reject_removes_user_and_invalid_action(self) -> None:
        email = f"reject-{uuid4().hex[:8]}@example.com"
        self._register(email)
        pending = self.client.get("/api/admin/pending-users", headers=self._admin_headers()).json()
        user_id = next(u["id"] for u in pending if u["email"] == email)

        resp = self.client.patch(
            f"/api/admin/users/{user_id}/approval",
            json={"action": "maybe"},
            headers=self._admin_headers(),
        )
        self.assertEqual(resp.status_code, 400)

        resp = self.client.patch(
            f"/api/admin/users/{user_id}/approval",
            json={"action": "reject"},
            headers=self._admin_headers(),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self._login(email, "secret-pass").status_code, 400)

    def test_admin_routes_forbidden_for_regular_users(self) -> None:
        headers = self._approved_user_headers()
        resp = self.client.get("/api/admin/pending-users", headers=headers)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["detail"], "Admin access required")

    def test_food_entries_today_summary_and_delete(self) -> None:
        headers = self._approved_user_headers()

        resp = self.client.post(
            "/api/food-entries",
            data={"foodName": "Idli", "weight": "80", "calories": "120", "protein": "4"},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        entry_id = resp.json()["id"]

        resp = self.client.post(
            "/api/food-entries",
            data={"foodName": "Sambar", "weight": "200", "calories": "150", "protein": "6"},
            files={"foodImage": ("sambar.jpg", b"\xff\xd8fake-jpeg", "image/jpeg")},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 201, resp.text)

        today = self.client.get("/api/food-entries/today", headers=headers).json()
        self.assertEqual({e["food_name"] for e in today}, {"Idli", "Sambar"})
        with_image = next(e for e in today if e["food_name"] == "Sambar")
        self.assertTrue(with_image["image_path"].startswith("foodImage-"))
        self.assertTrue((self.uploads_dir / with_image["image_path"]).exists())

        summary = self.client.get("/api/food-entries/summary", headers=headers).json()
        self.assertEqual(summary["entry_count"], 2)
        self.assertEqual(summary["calories"]["consumed"], 270.0)
        self.assertEqual(summary["calories"]["goal"], 2800.0)
        self.assertEqual(summary["protein"]["consumed"], 10.0)

        resp = self.client.delete(f"/api/food-entries/{entry_id}", headers=headers)
        self.assertEqual(resp.status_code, 200)
        resp = self.client.delete(f"/api/food-entries/{entry_id}", headers=headers)
        self.assertEqual(resp.status_code, 404)

        today = self.client.get("/api/food-entries/today", headers=headers).json()
        self.assertEqual([e["food_name"] for e in today], ["Sambar"])

    def test_negative_values_rejected(self) -> None:
        headers = self._approved_user_headers()
        resp = self.client.post(
            "/api/food-entries",
            data={"foodName": "Idli", "weight": "-1", "calories": "120", "protein": "4"},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 422)

    def test_non_finite_values_rejected(self) -> None:
        headers = self._approved_user_headers()
        for field in ("weight", "calories", "protein"):
            for raw in ("inf", "nan"):
                with self.subTest(field=field, raw=raw):
                    data = {"foodName": "Idli", "weight": "80", "calories": "120", "protein": "4"}
                    data[field] = raw
                    resp = self.client.post("/api/food-entries", data=data, headers=headers)
                    self.assertEqual(resp.status_code, 422)
        today = self.client.get("/api/food-entries/today", headers=headers).json()
        self.assertEqual(today, [])

    def test_register_rejects_non_finite_body_metrics(self) -> None:
        for field in ("height", "weight"):
            for raw in ("inf", "nan"):
                with self.subTest(field=field, raw=raw):
                    email = f"inf-{uuid4().hex[:8]}@example.com"
                    resp = self._register(email, **{field: raw})
                    self.assertEqual(resp.status_code, 422)
                    self.assertEqual(self._login(email, "secret-pass").status_code, 400)

    def test_token_carries_no_admin_claim(self) -> None:
        from calorie_backend.auth.security import decode_token

        resp = self._login(ADMIN_EMAIL, ADMIN_PASSWORD)
        self.assertEqual(resp.status_code, 200, resp.text)
        payload = decode_token(resp.json()["token"])
        self.assertEqual(payload["sub"], resp.json()["user"]["id"])
        self.assertEqual(payload["email"], ADMIN_EMAIL)
        self.assertNotIn("is_admin", payload)

    def test_history_window(self) -> None:
        from calorie_backend.food.storage import create_entry

        headers = self._approved_user_headers()
        profile = self.client.get("/api/profile", headers=headers).json()
        create_entry(
            user_id=profile["id"],
            food_name="Old Meal",
            weight_grams=100,
            calories=100,
            protein=1,
            now=datetime.now() - timedelta(days=10),
        )
        create_entry(user_id=profile["id"], food_name="New Meal", weight_grams=100, calories=100, protein=1)

        recent = self.client.get("/api/food-entries/history", headers=headers).json()
        self.assertEqual([e["food_name"] for e in recent], ["New Meal"])

        month = self.client.get("/api/food-entries/history?days=30", headers=headers).json()
        self.assertEqual([e["food_name"] for e in month], ["New Meal", "Old Meal"])

        resp = self.client.get("/api/food-entries/history?days=0", headers=headers)
        self.assertEqual(resp.status_code, 422)

    def test_profile(self) -> None:
        headers = self._approved_user_headers()
        profile = self.client.get("/api/profile", headers=headers).json()
        self.assertEqual(profile["body_type"], "Lean")
        self.assertEqual(profile["height"], 172.0)
        self.assertEqual(profile["daily_protein_goal"], 117)
        self.assertNotIn("password_hash", profile)

    def test_analyze_food_image(self) -> None:
        headers = self._approved_user_headers()
        reply = 'Sure! ```json\n{"foodName":"Idli","weight":80,"calories":120,"protein":4}\n```'
        with mock.patch("calorie_backend.gemini.generate_with_image", return_value=reply) as call:
            resp = self.client.post(
                "/api/analyze-food-image",
                files={"foodImage": ("idli.png", b"\x89PNG-bytes", "image/png")},
                headers=headers,
            )
        self.assertEqual(resp.status_code, 200, resp.text)
        body = resp.json()
        self.assertEqual(body["analysis"], {"foodName": "Idli", "weight": 80.0, "calories": 120.0, "protein": 4.0})
        self.assertTrue(body["imagePath"].startswith("foodImage-"))
        self.assertTrue(body["imagePath"].endswith(".png"))
        _prompt, image_bytes, media_type = call.call_args.args
        self.assertEqual(image_bytes, b"\x89PNG-bytes")
        self.assertEqual(media_type, "image/png")

    def test_analyze_food_image_upstream_failure(self) -> None:
        from calorie_backend.gemini import GeminiError

        headers = self._approved_user_headers()
        with mock.patch("calorie_backend.gemini.generate_with_image", side_effect=GeminiError("quota")):
            resp = self.client.post(
                "/api/analyze-food-image",
                files={"foodImage": ("idli.jpg", b"\xff\xd8", "image/jpeg")},
                headers=headers,
            )
        self.assertEqual(resp.status_code, 502)

    def test_analyze_food_image_rejects_missing_or_non_image(self) -> None:
        headers = self._approved_user_headers()
        resp = self.client.post("/api/analyze-food-image", headers=headers)
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post(
            "/api/analyze-food-image",
            files={"foodImage": ("notes.txt", b"hello", "text/plain")},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], "Only image files are allowed!")

    def test_motivational_quote(self) -> None:
        from calorie_backend.gemini import GeminiError

        headers = self._approved_user_headers()
        with mock.patch("calorie_backend.gemini.generate_text", return_value="  Eat well, move daily.\n"):
            resp = self.client.get("/api/motivational-quote", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"quote": "Eat well, move daily."})

        with mock.patch("calorie_backend.gemini.generate_text", side_effect=GeminiError("down")):
            resp = self.client.get("/api/motivational-quote", headers=headers)
        self.assertEqual(resp.status_code, 502)


if __name__ == "__main__":
    unittest.main()
