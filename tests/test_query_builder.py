"""
Aggregation pipelines: filters, lookups, sort and pagination.
"""

from uuid import uuid4

import pytest

from app.core.errors import InvalidPage, InvalidSortField
from app.models import Comment, Users, Video
from app.services.query_builder import AggregationQuery, JoinSpec, validate_page


@pytest.fixture
async def fifteen_videos(make_user, make_video):
    owner = await make_user("creator")
    videos = [await make_video(owner, title=f"Clip {i:02d}", views=i) for i in range(15)]
    return owner, videos


class TestPagination:

    async def test_second_page_holds_the_remainder(self, session, fifteen_videos):
        page = await AggregationQuery(Video).sort_by("created_at", "asc").paginate(session, 2, 10)

        assert page.total == 15
        assert page.total_pages == 2
        assert len(page.items) == 5
        assert page.has_prev_page
        assert not page.has_next_page
        assert [item["title"] for item in page.items] == [f"Clip {i:02d}" for i in range(10, 15)]

    async def test_page_past_the_end_is_empty(self, session, fifteen_videos):
        page = await AggregationQuery(Video).sort_by("created_at", "asc").paginate(session, 3, 10)

        assert page.items == []
        assert page.total == 15
        assert not page.has_next_page

    async def test_empty_collection(self, session):
        page = await AggregationQuery(Video).paginate(session, 1, 10)
        assert page.total == 0
        assert page.total_pages == 0
        assert not page.has_next_page
        assert not page.has_prev_page

    @pytest.mark.parametrize("page,page_size", [(0, 10), (1, 0), (-1, 5), (1, 101)])
    async def test_invalid_page_arguments(self, session, page, page_size):
        with pytest.raises(InvalidPage):
            await AggregationQuery(Video).paginate(session, page, page_size)

    def test_validate_page_without_ceiling(self):
        validate_page(1, 10_000)
        with pytest.raises(InvalidPage):
            validate_page(1, 11, max_page_size=10)


class TestStages:

    def test_unknown_sort_field_is_rejected(self):
        with pytest.raises(InvalidSortField):
            AggregationQuery(Video).sort_by("popularity")

    def test_unknown_sort_direction_is_rejected(self):
        with pytest.raises(InvalidSortField):
            AggregationQuery(Video).sort_by("views", "sideways")

    async def test_sort_direction(self, session, fifteen_videos):
        rows = await AggregationQuery(Video).project("views").sort_by("views", "desc").all(session)
        assert [row["views"] for row in rows] == list(range(14, -1, -1))

    async def test_text_match_is_case_insensitive_substring(self, session, make_user, make_video):
        owner = await make_user("creator")
        await make_video(owner, title="Funny CATS compilation")
        await make_video(owner, title="Dogs only")
        await make_video(owner, title="100% pure cat")

        rows = await AggregationQuery(Video).match_text("title", "cat").project("title").all(session)
        assert sorted(row["title"] for row in rows) == ["100% pure cat", "Funny CATS compilation"]

    async def test_text_match_escapes_wildcards(self, session, make_user, make_video):
        owner = await make_user("creator")
        await make_video(owner, title="100% pure cat")
        await make_video(owner, title="1000 cats")

        rows = await AggregationQuery(Video).match_text("title", "0%").project("title").all(session)
        assert [row["title"] for row in rows] == ["100% pure cat"]

    async def test_match_in_and_projection(self, session, fifteen_videos):
        _, videos = fifteen_videos
        wanted = [videos[1].id, videos[4].id]

        rows = await AggregationQuery(Video).match_in("id", wanted).project("id", "title").all(session)

        assert {row["id"] for row in rows} == set(wanted)
        assert all(set(row) == {"id", "title"} for row in rows)


class TestJoins:

    async def test_nested_one_to_one_join(self, session, make_user, make_video):
        owner = await make_user("creator")
        await make_video(owner)

        row = await (
            AggregationQuery(Video)
            .join(JoinSpec(Users, "owner_id", "id", alias="owner", fields=("id", "username")))
            .project("title")
            .first(session)
        )
        assert row["owner"] == {"id": owner.id, "username": "creator"}

    async def test_mandatory_join_drops_unmatched_rows(self, session, make_user, make_video):
        owner = await make_user("creator")
        await make_video(owner)
        await make_video(owner, owner_id=uuid4())

        page = await (
            AggregationQuery(Video)
            .join(JoinSpec(Users, "owner_id", "id", alias="owner", fields=("username",)))
            .paginate(session, 1, 10)
        )
        assert page.total == 1
        assert len(page.items) == 1

    async def test_optional_join_yields_empty_projection(self, session, make_user, make_video):
        owner = await make_user("creator")
        await make_video(owner, owner_id=uuid4())

        rows = await (
            AggregationQuery(Video)
            .join(JoinSpec(Users, "owner_id", "id", alias="owner", fields=("username",), mandatory=False))
            .project("title")
            .all(session)
        )
        assert rows[0]["owner"] == {}

    async def test_flattened_join(self, session, make_user, make_video):
        owner = await make_user("creator")
        await make_video(owner, title="Flat")

        row = await (
            AggregationQuery(Video)
            .join(JoinSpec(Users, "owner_id", "id", alias="owner", fields=("username",), flatten=True))
            .project("title")
            .first(session)
        )
        assert row == {"title": "Flat", "username": "creator"}

    async def test_one_to_many_join_attaches_lists(self, session, make_user, make_video, make_comment):
        owner = await make_user("creator")
        busy = await make_video(owner, title="Busy")
        await make_video(owner, title="Quiet")
        await make_comment(busy, owner, "first")
        await make_comment(busy, owner, "second")

        rows = await (
            AggregationQuery(Video)
            .join(JoinSpec(Comment, "id", "video_id", alias="comments", fields=("content",), many=True))
            .project("title")
            .sort_by("created_at", "asc")
            .all(session)
        )

        assert [row["title"] for row in rows] == ["Busy", "Quiet"]
        assert sorted(c["content"] for c in rows[0]["comments"]) == ["first", "second"]
        assert rows[1]["comments"] == []
        assert "id" not in rows[0]

    async def test_nested_pipeline_in_one_to_many_join(self, session, make_user, make_video, make_comment):
        owner = await make_user("creator")
        video = await make_video(owner)
        await make_comment(video, owner, "hello")

        nested = (
            AggregationQuery(Comment)
            .join(JoinSpec(Users, "owner_id", "id", alias="author", fields=("username",), flatten=True))
            .project("content")
        )
        row = await (
            AggregationQuery(Video)
            .join(JoinSpec(nested, "id", "video_id", alias="comments", many=True))
            .project("id")
            .first(session)
        )
        assert row["comments"] == [{"content": "hello", "username": "creator"}]

    async def test_join_match_filters_foreign_rows(self, session, make_user, make_video, make_comment):
        owner = await make_user("creator")
        public = await make_video(owner, title="Public")
        draft = await make_video(owner, title="Draft", is_published=False)
        await make_comment(public, owner, "on public")
        await make_comment(draft, owner, "on draft")

        page = await (
            AggregationQuery(Comment)
            .join(JoinSpec(Video, "video_id", "id", alias="video", fields=("title",), match={"is_published": True}))
            .project("content")
            .paginate(session, 1, 10)
        )
        assert page.total == 1
        assert page.items == [{"content": "on public", "video": {"title": "Public"}}]

    def test_join_spec_validation(self):
        with pytest.raises(ValueError):
            JoinSpec(Users, "owner_id", "id", alias="owner", match={"nope": 1})
        with pytest.raises(ValueError):
            JoinSpec(Users, "owner_id", "id", alias="owner", fields=("nope",))
        with pytest.raises(ValueError):
            JoinSpec(Comment, "id", "video_id", alias="comments", many=True, flatten=True)
        with pytest.raises(ValueError):
            JoinSpec(AggregationQuery(Comment), "id", "video_id", alias="comments")
