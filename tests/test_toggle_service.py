"""
Toggle-relation manager: likes and subscriptions.
"""

from uuid import uuid4

import pytest
from sqlalchemy import false, func, select
from sqlalchemy.exc import IntegrityError

from app.core.errors import SelfReferenceNotAllowed, TargetNotFound
from app.models import Like, LikeTargetType, Subscription
from app.services.like_service import LikeService
from app.services.subscription_service import SubscriptionService
from app.services.toggle_service import (
    CommentTarget,
    ToggleOutcome,
    ToggleRelationManager,
    TweetTarget,
    VideoTarget,
    like_edge,
    subscription_edge,
)


async def count(session, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


class TestLikeToggle:

    async def test_like_then_unlike_restores_absence(self, session, make_user, make_video):
        owner = await make_user("u1")
        fan = await make_user("u2")
        video = await make_video(owner)
        service = LikeService(session)

        assert await service.toggle_video_like(str(video.id), fan.id) is ToggleOutcome.CREATED
        assert await service.is_liked(fan.id, VideoTarget(video.id))
        assert await count(session, Like) == 1

        assert await service.toggle_video_like(str(video.id), fan.id) is ToggleOutcome.REMOVED
        assert not await service.is_liked(fan.id, VideoTarget(video.id))
        assert await count(session, Like) == 0

    async def test_parity_decides_end_state(self, session, make_user, make_tweet):
        author = await make_user("author")
        fan = await make_user("fan")
        tweet = await make_tweet(author)
        service = LikeService(session)

        outcomes = [await service.toggle_tweet_like(str(tweet.id), fan.id) for _ in range(5)]
        assert outcomes[-1] is ToggleOutcome.CREATED
        assert await count(session, Like) == 1

    async def test_likes_on_different_targets_are_independent(self, session, make_user, make_video, make_comment):
        owner = await make_user("owner")
        fan = await make_user("fan")
        video = await make_video(owner)
        comment = await make_comment(video, owner)
        service = LikeService(session)

        await service.toggle_video_like(str(video.id), fan.id)
        await service.toggle_comment_like(str(comment.id), fan.id)

        rows = (await session.execute(select(Like.target_type))).scalars().all()
        assert sorted(rows, key=lambda t: t.value) == [LikeTargetType.COMMENT, LikeTargetType.VIDEO]

    async def test_missing_target_fails(self, session, make_user):
        fan = await make_user("fan")
        with pytest.raises(TargetNotFound):
            await LikeService(session).toggle_comment_like(str(uuid4()), fan.id)
        assert await count(session, Like) == 0

    async def test_draft_video_is_only_likeable_by_its_owner(self, session, make_user, make_video):
        owner = await make_user("owner")
        stranger = await make_user("stranger")
        draft = await make_video(owner, is_published=False)
        service = LikeService(session)

        with pytest.raises(TargetNotFound):
            await service.toggle_video_like(str(draft.id), stranger.id)
        assert await count(session, Like) == 0

        assert await service.toggle_video_like(str(draft.id), owner.id) is ToggleOutcome.CREATED

    async def test_concurrent_create_resolves_to_removed(self, session, sessionmaker, make_user, make_video, monkeypatch):
        owner = await make_user("owner")
        fan = await make_user("fan")
        video = await make_video(owner)

        async with sessionmaker() as other:
            other.add(Like(liked_by_id=fan.id, target_type=LikeTargetType.VIDEO, target_id=video.id))
            await other.commit()

        execute = session.execute
        lookups = []

        async def stale_lookup(statement, *args, **kwargs):
            # the first lookup runs before the other request committed
            if not lookups:
                lookups.append(statement)
                return await execute(statement.where(false()), *args, **kwargs)
            return await execute(statement, *args, **kwargs)

        monkeypatch.setattr(session, "execute", stale_lookup)
        outcome = await ToggleRelationManager(session).toggle(like_edge(fan.id, VideoTarget(video.id)))
        monkeypatch.undo()

        assert outcome is ToggleOutcome.REMOVED
        assert len(lookups) == 1
        assert await count(session, Like) == 0

    async def test_edge_key_is_unique_in_storage(self, session, make_user, make_video):
        owner = await make_user("owner")
        video = await make_video(owner)
        session.add(Like(liked_by_id=owner.id, target_type=LikeTargetType.VIDEO, target_id=video.id))
        await session.commit()

        session.add(Like(liked_by_id=owner.id, target_type=LikeTargetType.VIDEO, target_id=video.id))
        with pytest.raises(IntegrityError):
            await session.commit()
        await session.rollback()

    async def test_like_edge_uses_tagged_target(self):
        subject, target = uuid4(), uuid4()
        edge = like_edge(subject, CommentTarget(target))
        assert edge.key == {"liked_by_id": subject, "target_type": LikeTargetType.COMMENT, "target_id": target}
        assert like_edge(subject, TweetTarget(target)).resource == "Tweet"


class TestSubscriptionToggle:

    async def test_subscribe_and_unsubscribe(self, session, make_user):
        viewer = await make_user("viewer")
        channel = await make_user("channel")
        service = SubscriptionService(session)

        assert await service.toggle_subscription(str(channel.id), viewer.id) is ToggleOutcome.CREATED
        assert await service.is_subscribed(viewer.id, channel.id)
        assert await service.toggle_subscription(str(channel.id), viewer.id) is ToggleOutcome.REMOVED
        assert await count(session, Subscription) == 0

    async def test_self_subscription_is_rejected(self, session, make_user):
        user = await make_user("solo")
        with pytest.raises(SelfReferenceNotAllowed):
            await SubscriptionService(session).toggle_subscription(str(user.id), user.id)
        assert await count(session, Subscription) == 0

    async def test_unknown_channel_fails(self, session, make_user):
        user = await make_user("viewer")
        with pytest.raises(TargetNotFound):
            await ToggleRelationManager(session).toggle(subscription_edge(user.id, uuid4()))
