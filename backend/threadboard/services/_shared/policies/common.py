def is_owner(*, actor_id, owner_id) -> bool:
    """Return True if the actor owns the resource."""
    return actor_id is not None and str(actor_id) == str(owner_id)


def is_foreign_parent(*, parent_post_id, post_id) -> bool:
    """Return True when a reply's parent belongs to another post."""
    return int(parent_post_id) != int(post_id)
