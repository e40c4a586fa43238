from app.models.users import Users
from app.models.videos import Video
from app.models.comments import Comment
from app.models.likes import Like, LikeTargetType
from app.models.subscriptions import Subscription
from app.models.playlists import Playlist, PlaylistVideo
from app.models.tweets import Tweet

__all__ = [
    "Users",
    "Video",
    "Comment",
    "Like",
    "LikeTargetType",
    "Subscription",
    "Playlist",
    "PlaylistVideo",
    "Tweet",
]
