"""Comment threads and series reviews."""

from tests.base import ApiTestCase


class TestComments(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.creator, _ = self.new_creator("mangaka")
        series = self.create_series(self.creator)
        self.chapter = self.create_chapter(self.creator, series["id"], 1)
        self.other_chapter = self.create_chapter(self.creator, series["id"], 2)
        self.reader, self.reader_user = self.new_client("reader")
        self.url = f"/api/chapters/{self.chapter['id']}/comments"

    def _comment(self, client, content, parent_id=None, url=None):
        return client.post(url or self.url, json={"content": content, "parentId": parent_id})

    def test_thread_with_replies(self):
        parent = self._comment(self.reader, "Great start").get_json()
        reply = self._comment(self.creator, "Thanks!", parent["id"])
        self.assertEqual(reply.status_code, 201)

        thread = self.client.get(self.url).get_json()
        self.assertEqual(len(thread), 1)
        self.assertEqual(thread[0]["user"]["username"], "reader")
        self.assertEqual([r["content"] for r in thread[0]["replies"]], ["Thanks!"])

    def test_validation(self):
        self.assertEqual(self._comment(self.reader, "   ").status_code, 400)
        self.assertEqual(self._comment(self.client, "anon").status_code, 401)
        self.assertEqual(
            self._comment(self.reader, "lost", url="/api/chapters/nope/comments").status_code, 404
        )

        other_url = f"/api/chapters/{self.other_chapter['id']}/comments"
        foreign = self._comment(self.reader, "elsewhere", url=other_url).get_json()
        self.assertEqual(self._comment(self.reader, "reply", foreign["id"]).status_code, 400)

    def test_delete_permissions(self):
        parent = self._comment(self.reader, "Great start").get_json()
        self._comment(self.creator, "Thanks!", parent["id"])

        self.assertEqual(self.creator.delete(f"/api/comments/{parent['id']}").status_code, 403)
        self.assertEqual(self.reader.delete(f"/api/comments/{parent['id']}").status_code, 204)
        self.assertEqual(self.client.get(self.url).get_json(), [])
        self.assertEqual(self.reader.delete(f"/api/comments/{parent['id']}").status_code, 404)


class TestReviews(ApiTestCase):

    def setUp(self):
        super().setUp()
        creator, _ = self.new_creator("mangaka")
        self.series = self.create_series(creator)
        self.url = f"/api/series/{self.series['id']}/reviews"

    def test_rating_is_recomputed(self):
        first, _ = self.new_client("alice")
        second, _ = self.new_client("bobby")
        self.assertEqual(first.post(self.url, json={"rating": 4, "content": "Good"}).status_code, 201)
        self.assertEqual(second.post(self.url, json={"rating": 5}).status_code, 201)

        series = self.client.get(f"/api/series/{self.series['id']}").get_json()
        self.assertEqual(series["rating"], "4.50")
        self.assertEqual(series["ratingCount"], 2)

        reviews = self.client.get(self.url).get_json()
        self.assertEqual({r["user"]["username"] for r in reviews}, {"alice", "bobby"})

    def test_one_review_per_user(self):
        client, _ = self.new_client("alice")
        client.post(self.url, json={"rating": 4})
        self.assertEqual(client.post(self.url, json={"rating": 2}).status_code, 400)

    def test_rating_range(self):
        client, _ = self.new_client("alice")
        for rating in (0, 6, "five"):
            with self.subTest(rating=rating):
                self.assertEqual(client.post(self.url, json={"rating": rating}).status_code, 400)
