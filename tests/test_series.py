"""Series catalogue: creation, listing, search and ownership."""

import io

from mangaverse import db
from mangaverse.models.series import Series
from tests.base import ApiTestCase


class TestSeriesCrud(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.creator, self.creator_user = self.new_creator("mangaka")

    def test_non_creator_cannot_create(self):
        client, _ = self.new_client("reader")
        resp = client.post("/api/series", json={"title": "Mine", "type": "manga"})
        self.assertEqual(resp.status_code, 403)

    def test_create_validates_type(self):
        resp = self.creator.post("/api/series", json={"title": "Mine", "type": "comic"})
        self.assertEqual(resp.status_code, 400)
        resp = self.creator.post("/api/series", json={"type": "manga"})
        self.assertEqual(resp.status_code, 400)

    def test_create_and_fetch(self):
        series = self.create_series(self.creator, genres=["Action", "Drama"])
        self.assertEqual(series["authorId"], self.creator_user["id"])
        self.assertEqual(series["status"], "ongoing")
        self.assertEqual(series["rating"], "0.00")
        self.assertEqual(series["author"]["username"], "mangaka")

        resp = self.client.get(f"/api/series/{series['id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["genres"], ["Action", "Drama"])
        self.assertEqual(resp.get_json()["viewCount"], 0)

    def test_missing_series_is_404(self):
        self.assertEqual(self.client.get("/api/series/nope").status_code, 404)

    def test_multipart_create_with_cover(self):
        resp = self.creator.post(
            "/api/series",
            data={
                "title": "Painted",
                "type": "webtoon",
                "genres": '["Romance", "Drama"]',
                "tags": "slow burn, office",
                "coverImage": (io.BytesIO(b"\x89PNG fake"), "cover.png", "image/png"),
            },
            content_type="multipart/form-data",
        )
        self.assertEqual(resp.status_code, 201, resp.get_json())
        series = resp.get_json()
        self.assertEqual(series["genres"], ["Romance", "Drama"])
        self.assertEqual(series["tags"], ["slow burn", "office"])
        self.assertTrue(series["coverImageUrl"].startswith("/uploads/"))

        cover = self.client.get(series["coverImageUrl"])
        self.assertEqual(cover.status_code, 200)
        self.assertEqual(cover.data, b"\x89PNG fake")
        cover.close()

    def test_cover_rejects_other_file_types(self):
        resp = self.creator.post(
            "/api/series",
            data={
                "title": "Painted",
                "type": "webtoon",
                "coverImage": (io.BytesIO(b"GIF89a"), "cover.gif", "image/gif"),
            },
            content_type="multipart/form-data",
        )
        self.assertEqual(resp.status_code, 400)

    def test_only_owner_can_update_or_delete(self):
        series = self.create_series(self.creator)
        other = self.new_creator("rival")[0]
        self.assertEqual(
            other.patch(f"/api/series/{series['id']}", json={"title": "Stolen"}).status_code, 403
        )
        self.assertEqual(other.delete(f"/api/series/{series['id']}").status_code, 403)

        resp = self.creator.patch(
            f"/api/series/{series['id']}", json={"title": "Renamed", "status": "completed"}
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["title"], "Renamed")
        self.assertEqual(resp.get_json()["status"], "completed")

    def test_delete_removes_chapters(self):
        series = self.create_series(self.creator)
        chapter = self.create_chapter(self.creator, series["id"], 1)
        reader, _ = self.new_client("reader")
        reader.post("/api/bookmarks", json={"seriesId": series["id"]})

        resp = self.creator.delete(f"/api/series/{series['id']}")
        self.assertEqual(resp.status_code, 204)
        self.assertEqual(self.client.get(f"/api/series/{series['id']}").status_code, 404)
        self.assertEqual(self.client.get(f"/api/chapters/{chapter['id']}").status_code, 404)
        self.assertEqual(reader.get("/api/user/bookmarks").get_json(), [])

    def test_cover_link_must_be_external(self):
        resp = self.creator.post(
            "/api/series",
            json={"title": "Escape", "type": "manga", "coverImageUrl": "/uploads/../../app.db"},
        )
        self.assertEqual(resp.status_code, 400)

        series = self.create_series(self.creator, coverImageUrl="https://cdn.example.com/cover.png")
        self.assertEqual(series["coverImageUrl"], "https://cdn.example.com/cover.png")
        self.assertEqual(self.creator.delete(f"/api/series/{series['id']}").status_code, 204)


class TestSeriesDiscovery(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.creator, self.creator_user = self.new_creator("mangaka")
        self.manga = self.create_series(self.creator, title="Iron Blossom", genres=["Action"])
        self.novel = self.create_series(
            self.creator, title="Quiet Library", type="novel", description="Books and ghosts"
        )

    def _set_counts(self, series_id, **fields):
        with self.app.app_context():
            series = db.session.get(Series, series_id)
            for key, value in fields.items():
                setattr(series, key, value)
            db.session.commit()

    def test_list_filters(self):
        resp = self.client.get("/api/series?type=novel")
        self.assertEqual([s["id"] for s in resp.get_json()], [self.novel["id"]])

        resp = self.client.get("/api/series?genre=action")
        self.assertEqual([s["id"] for s in resp.get_json()], [self.manga["id"]])

        # Unknown filter values are ignored.
        resp = self.client.get("/api/series?type=comic")
        self.assertEqual(len(resp.get_json()), 2)

    def test_trending_orders_by_views_then_bookmarks(self):
        self._set_counts(self.manga["id"], view_count=10, bookmark_count=1)
        self._set_counts(self.novel["id"], view_count=10, bookmark_count=5)
        resp = self.client.get("/api/series/trending")
        self.assertEqual([s["id"] for s in resp.get_json()], [self.novel["id"], self.manga["id"]])

    def test_rising_requires_views(self):
        self._set_counts(self.manga["id"], view_count=150)
        self._set_counts(self.novel["id"], view_count=100)
        resp = self.client.get("/api/series/rising")
        self.assertEqual([s["id"] for s in resp.get_json()], [self.manga["id"]])

    def test_search(self):
        self.assertEqual(self.client.get("/api/series/search").status_code, 400)

        resp = self.client.get("/api/series/search?q=ghosts")
        self.assertEqual([s["id"] for s in resp.get_json()], [self.novel["id"]])

        resp = self.client.get("/api/search?q=studio")
        body = resp.get_json()
        self.assertEqual(body["series"], [])
        self.assertEqual([u["id"] for u in body["creators"]], [self.creator_user["id"]])

    def test_trending_creators(self):
        _, quiet = self.new_creator("quiet")
        self.update_user(quiet["id"], followers_count=3)
        resp = self.client.get("/api/creators/trending")
        self.assertEqual([u["username"] for u in resp.get_json()], ["quiet", "mangaka"])

    def test_creator_series(self):
        resp = self.creator.get("/api/creator/series")
        self.assertEqual(len(resp.get_json()), 2)
