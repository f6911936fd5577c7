"""Following users and series, and bookmarking series."""

from tests.base import ApiTestCase


class TestFollows(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.creator, self.creator_user = self.new_creator("mangaka")
        self.series = self.create_series(self.creator)
        self.reader, self.reader_user = self.new_client("reader")

    def _followers_count(self):
        return self.client.get(f"/api/users/{self.creator_user['id']}").get_json()["followersCount"]

    def test_follow_and_unfollow_user(self):
        body = {"targetId": self.creator_user["id"], "targetType": "user"}
        resp = self.reader.post("/api/follow", json=body)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self._followers_count(), 1)
        self.assertEqual(self.reader.post("/api/follow", json=body).status_code, 400)

        status = self.reader.get(f"/api/users/{self.creator_user['id']}/is-following").get_json()
        self.assertTrue(status["isFollowing"])
        followers = self.client.get(f"/api/users/{self.creator_user['id']}/followers").get_json()
        self.assertEqual([u["id"] for u in followers], [self.reader_user["id"]])
        following = self.client.get(f"/api/users/{self.reader_user['id']}/following").get_json()
        self.assertEqual([u["id"] for u in following], [self.creator_user["id"]])

        self.assertEqual(self.reader.delete("/api/follow", json=body).status_code, 204)
        self.assertEqual(self._followers_count(), 0)
        # Unfollowing twice never drives the count negative.
        self.assertEqual(self.reader.delete("/api/follow", json=body).status_code, 204)
        self.assertEqual(self._followers_count(), 0)

    def test_follow_validation(self):
        cases = [
            ({}, 400),
            ({"targetId": self.creator_user["id"], "targetType": "group"}, 400),
            ({"targetId": self.reader_user["id"], "targetType": "user"}, 400),
            ({"targetId": "missing", "targetType": "user"}, 404),
            ({"targetId": "missing", "targetType": "series"}, 404),
        ]
        for body, status in cases:
            with self.subTest(body=body):
                self.assertEqual(self.reader.post("/api/follow", json=body).status_code, status)

    def test_follow_series(self):
        body = {"targetId": self.series["id"], "targetType": "series"}
        self.assertEqual(self.reader.post("/api/follow", json=body).status_code, 201)
        followed = self.reader.get("/api/user/followed-series").get_json()
        self.assertEqual([s["id"] for s in followed], [self.series["id"]])
        self.assertEqual(self._followers_count(), 0)


class TestBookmarks(ApiTestCase):

    def setUp(self):
        super().setUp()
        creator, _ = self.new_creator("mangaka")
        self.series = self.create_series(creator)
        self.reader, _ = self.new_client("reader")

    def _bookmark_count(self):
        return self.client.get(f"/api/series/{self.series['id']}").get_json()["bookmarkCount"]

    def test_bookmark_lifecycle(self):
        resp = self.reader.post("/api/bookmarks", json={"seriesId": self.series["id"]})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self._bookmark_count(), 1)
        again = self.reader.post("/api/bookmarks", json={"seriesId": self.series["id"]})
        self.assertEqual(again.status_code, 400)

        listed = self.reader.get("/api/user/bookmarks").get_json()
        self.assertEqual([s["id"] for s in listed], [self.series["id"]])

        self.assertEqual(self.reader.delete(f"/api/bookmarks/{self.series['id']}").status_code, 204)
        self.assertEqual(self._bookmark_count(), 0)

    def test_unknown_series(self):
        resp = self.reader.post("/api/bookmarks", json={"seriesId": "missing"})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(self.reader.post("/api/bookmarks", json={}).status_code, 400)

    def test_folders(self):
        resp = self.reader.post("/api/user/bookmark-folders", json={"name": "Favourites"})
        self.assertEqual(resp.status_code, 201)
        folder = resp.get_json()
        self.assertEqual(
            self.reader.post("/api/user/bookmark-folders", json={"name": "Favourites"}).status_code, 400
        )

        resp = self.reader.post(
            "/api/bookmarks", json={"seriesId": self.series["id"], "folderId": folder["id"]}
        )
        self.assertEqual(resp.get_json()["folderId"], folder["id"])
        names = [f["name"] for f in self.reader.get("/api/user/bookmark-folders").get_json()]
        self.assertEqual(names, ["Favourites"])
