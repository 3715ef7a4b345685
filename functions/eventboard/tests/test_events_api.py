import unittest

from eventboard.tests.testing_utils import ApiTestCase


class CreateEventTests(ApiTestCase, unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.owner = self.register(name="Ann", email="ann@x.com")
        self.headers = self.auth_headers(self.owner)

    def test_create_requires_auth(self):
        response = self.client.post("/events", json={"title": "Meetup"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(self.db.collections.get("events", {}), {})

    def test_create_requires_title(self):
        for body in ({}, {"title": "  "}, {"title": 3}):
            with self.subTest(body=body):
                response = self.client.post("/events", json=body, headers=self.headers)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"error": "title is required"})

    def test_create_stores_trimmed_fields_and_owner(self):
        event_id = self.create_event(
            self.headers,
            title=" Meetup ",
            location=" Park ",
            description="   ",
            imageUrl="https://img.test/a.png",
        )
        stored = self.db.get("events", event_id)
        self.assertEqual(stored["title"], "Meetup")
        self.assertEqual(stored["location"], "Park")
        self.assertIsNone(stored["description"])
        self.assertEqual(stored["imageUrl"], "https://img.test/a.png")
        self.assertIsNone(stored["imageDeleteUrl"])
        self.assertEqual(stored["ownerUid"], self.owner)
        self.assertEqual(stored["ownerName"], "Ann")
        self.assertEqual(stored["ownerEmail"], "ann@x.com")
        self.assertIsNotNone(stored["createdAt"])

    def test_owner_name_falls_back_to_email_local_part(self):
        self.db.delete("users", self.owner)
        self.auth.accounts[self.owner].display_name = None
        event_id = self.create_event(self.headers)
        self.assertEqual(self.db.get("events", event_id)["ownerName"], "ann")

    def test_owner_name_unknown_without_any_source(self):
        event_id = self.create_event(self.auth_headers("anonymous"))
        stored = self.db.get("events", event_id)
        self.assertEqual(stored["ownerName"], "Unknown")
        self.assertIsNone(stored["ownerEmail"])


class ReadEventTests(ApiTestCase, unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.ann = self.register(name="Ann", email="ann@x.com")
        self.bob = self.register(name="Bob", email="bob@x.com")

    def test_get_event_is_public(self):
        event_id = self.create_event(self.auth_headers(self.ann), location="Hall")
        response = self.client.get(f"/events/{event_id}")
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["id"], event_id)
        self.assertEqual(payload["location"], "Hall")
        self.assertEqual(payload["ownerUid"], self.ann)

    def test_get_missing_event(self):
        response = self.client.get("/events/does-not-exist")
        self.assertEqual(response.status_code, 404)

    def test_list_events_newest_first(self):
        headers = self.auth_headers(self.ann)
        first = self.create_event(headers, title="First")
        second = self.create_event(headers, title="Second")
        third = self.create_event(headers, title="Third")

        payload = self.client.get("/events").json()
        self.assertEqual(payload["count"], 3)
        self.assertEqual(payload["limit"], 50)
        self.assertEqual([e["id"] for e in payload["events"]], [third, second, first])

    def test_list_events_default_and_hard_cap(self):
        for i in range(250):
            self.db.add(
                "events",
                {"title": f"e{i}", "ownerUid": self.ann, "createdAt": self.db.clock()},
            )

        default = self.client.get("/events").json()
        self.assertEqual(default["count"], 50)

        capped = self.client.get("/events", params={"limit": 500}).json()
        self.assertEqual(capped["count"], 200)
        self.assertEqual(capped["limit"], 200)

        small = self.client.get("/events", params={"limit": 7}).json()
        self.assertEqual(small["count"], 7)

    def test_list_mine_filters_by_owner(self):
        mine = self.create_event(self.auth_headers(self.ann), title="Mine")
        self.create_event(self.auth_headers(self.bob), title="Theirs")

        response = self.client.get("/events/mine", headers=self.auth_headers(self.ann))
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["count"], 1)
        self.assertEqual(payload["events"][0]["id"], mine)

    def test_list_mine_respects_limit(self):
        headers = self.auth_headers(self.ann)
        for i in range(3):
            self.create_event(headers, title=f"Mine {i}")
        self.create_event(self.auth_headers(self.bob), title="Theirs")

        payload = self.client.get(
            "/events/mine", params={"limit": "2"}, headers=headers
        ).json()
        self.assertEqual(payload["count"], 2)
        self.assertEqual(payload["limit"], 2)
        self.assertEqual(
            [e["title"] for e in payload["events"]], ["Mine 2", "Mine 1"]
        )
        self.assertTrue(all(e["ownerUid"] == self.ann for e in payload["events"]))

    def test_list_mine_requires_auth(self):
        self.assertEqual(self.client.get("/events/mine").status_code, 401)


class MutateEventTests(ApiTestCase, unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.ann = self.register(name="Ann", email="ann@x.com")
        self.bob = self.register(name="Bob", email="bob@x.com")
        self.ann_headers = self.auth_headers(self.ann)
        self.bob_headers = self.auth_headers(self.bob)
        self.event_id = self.create_event(
            self.ann_headers,
            title="Meetup",
            location="Park",
            description="Bring snacks",
            imageUrl="https://img.test/a.png",
            imageDeleteUrl="https://img.test/del/a",
        )

    def test_update_by_owner(self):
        response = self.client.put(
            f"/events/{self.event_id}",
            json={"title": "Meetup v2", "location": "Hall"},
            headers=self.ann_headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["ok"])

        stored = self.db.get("events", self.event_id)
        self.assertEqual(stored["title"], "Meetup v2")
        self.assertEqual(stored["location"], "Hall")
        self.assertIsNotNone(stored["updatedAt"])

    def test_update_resets_omitted_fields_to_null(self):
        response = self.client.put(
            f"/events/{self.event_id}",
            json={"title": "Meetup"},
            headers=self.ann_headers,
        )
        self.assertEqual(response.status_code, 200)

        stored = self.db.get("events", self.event_id)
        self.assertIsNone(stored["location"])
        self.assertIsNone(stored["imageUrl"])
        self.assertIsNone(stored["imageDeleteUrl"])
        self.assertEqual(stored["description"], "Bring snacks")

    def test_update_requires_title(self):
        response = self.client.put(
            f"/events/{self.event_id}", json={"location": "Hall"}, headers=self.ann_headers
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.db.get("events", self.event_id)["location"], "Park")

    def test_update_by_other_user_is_forbidden(self):
        before = self.db.get("events", self.event_id)
        response = self.client.put(
            f"/events/{self.event_id}",
            json={"title": "Hijacked"},
            headers=self.bob_headers,
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.db.get("events", self.event_id), before)

    def test_delete_by_other_user_is_forbidden(self):
        response = self.client.delete(f"/events/{self.event_id}", headers=self.bob_headers)
        self.assertEqual(response.status_code, 403)
        self.assertIsNotNone(self.db.get("events", self.event_id))

    def test_missing_event_is_not_found(self):
        response = self.client.put(
            "/events/missing", json={"title": "x"}, headers=self.ann_headers
        )
        self.assertEqual(response.status_code, 404)
        response = self.client.delete("/events/missing", headers=self.ann_headers)
        self.assertEqual(response.status_code, 404)

    def test_mutations_require_auth(self):
        self.assertEqual(
            self.client.put(f"/events/{self.event_id}", json={"title": "x"}).status_code,
            401,
        )
        self.assertEqual(self.client.delete(f"/events/{self.event_id}").status_code, 401)

    def test_delete_by_owner(self):
        response = self.client.delete(f"/events/{self.event_id}", headers=self.ann_headers)
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(self.db.get("events", self.event_id))


class EndToEndTests(ApiTestCase, unittest.TestCase):
    def test_register_profile_event_lifecycle(self):
        response = self.client.post(
            "/users/register",
            json={"name": "Ann", "email": "ann@x.com", "password": "secret1"},
        )
        self.assertEqual(response.status_code, 201)
        uid = response.json()["uid"]
        headers = self.auth_headers(uid)

        me = self.client.get("/users/me", headers=headers)
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["name"], "Ann")

        created = self.client.post("/events", json={"title": "Meetup"}, headers=headers)
        self.assertEqual(created.status_code, 201)
        event_id = created.json()["id"]

        event = self.client.get(f"/events/{event_id}")
        self.assertEqual(event.status_code, 200)
        self.assertEqual(event.json()["ownerUid"], uid)
        self.assertEqual(event.json()["ownerName"], "Ann")

        other = self.register(name="Bob", email="bob@x.com")
        denied = self.client.delete(
            f"/events/{event_id}", headers=self.auth_headers(other)
        )
        self.assertEqual(denied.status_code, 403)

        deleted = self.client.delete(f"/events/{event_id}", headers=headers)
        self.assertEqual(deleted.status_code, 200)
        self.assertEqual(self.client.get(f"/events/{event_id}").status_code, 404)


if __name__ == "__main__":
    unittest.main()
