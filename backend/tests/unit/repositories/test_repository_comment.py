"""Unit tests for comment, file and like repositories."""

from __future__ import annotations

from tests.factories.comment import CommentFactory
from tests.factories.like import LikeFactory
from tests.factories.post import FileFactory, PostFactory
from tests.factories.user import UserFactory
from threadboard.models.file import File
from threadboard.repositories.comment import CommentRepository
from threadboard.repositories.file import FileRepository
from threadboard.repositories.like import LikeRepository


class TestCommentRepository:
    def test_list_thread_hides_deleted_comments_and_authors(self, session):
        repo = CommentRepository()
        post = PostFactory()
        c1 = CommentFactory(post=post)
        c2 = CommentFactory(post=post, parent_id=c1.id)
        CommentFactory(post=post, deleted=True)
        CommentFactory(post=post, author=UserFactory(deleted=True))
        CommentFactory()  # other post

        assert [c.id for c in repo.list_thread(post.id)] == [c1.id, c2.id]

    def test_list_by_author_pages_newest_first(self, session):
        repo = CommentRepository()
        author = UserFactory()
        ids = [CommentFactory(author=author).id for _ in range(3)]
        CommentFactory(author=author, deleted=True)

        first = repo.list_by_author(author.id, limit=2)
        assert [c.id for c in first] == [ids[2], ids[1]]
        assert [c.id for c in repo.list_by_author(author.id, cursor=ids[1])] == [ids[0]]

    def test_get_active_and_ownership(self, session):
        repo = CommentRepository()
        mine = CommentFactory()
        gone = CommentFactory(author=mine.author, deleted=True)

        assert repo.get_active(mine.id).id == mine.id
        assert repo.get_active(gone.id) is None
        assert repo.is_live_owned(mine.id, mine.author_id)
        assert not repo.is_live_owned(gone.id, mine.author_id)
        assert not repo.is_live_owned(mine.id, mine.author_id + 1000)


class TestFileRepository:
    def test_replace_for_post_swaps_the_whole_set(self, session):
        repo = FileRepository()
        post = PostFactory()
        FileFactory(post=post)
        FileFactory(post=post)

        new = [File(url="https://x/1.pdf", original_name="1.pdf", mime_type="application/pdf")]
        repo.replace_for_post(post, new)
        session.commit()

        rows = session.query(File).filter_by(post_id=post.id).order_by(File.id).all()
        assert [(f.original_name, f.size) for f in rows] == [("1.pdf", 0)]

    def test_replace_with_nothing_clears(self, session):
        repo = FileRepository()
        post = PostFactory()
        FileFactory(post=post)

        repo.replace_for_post(post, [])
        session.commit()
        assert session.query(File).filter_by(post_id=post.id).count() == 0


class TestLikeRepository:
    def test_find_pair(self, session):
        repo = LikeRepository()
        like = LikeFactory()
        LikeFactory(post=like.post)

        assert repo.find_pair(like.user_id, like.post_id).id == like.id
        assert repo.find_pair(like.user_id, like.post_id + 1000) is None
