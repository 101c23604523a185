import uuid

from catalog import context


def test_resolve_request_id_accepts_only_uuids():
    incoming = str(uuid.uuid4())
    assert context.resolve_request_id(incoming) == incoming
    generated = context.resolve_request_id("not-a-uuid")
    assert generated != "not-a-uuid"
    assert context.is_uuid(generated)
    assert context.is_uuid(context.resolve_request_id(None))


def test_request_ids_set_and_reset():
    tokens = context.set_request_ids("rid")
    try:
        assert context.get_request_id() == "rid"
        assert context.get_correlation_id() == "rid"
    finally:
        context.reset_request_ids(tokens)
    assert context.get_request_id() is None


def test_principal_context():
    principal = context.Principal(id=uuid.uuid4(), role="admin", auth_type="jwt", session_id="s")
    token = context.set_principal(principal)
    try:
        assert context.get_principal() is principal
        assert context.current_user_id() == principal.id
        assert principal.is_admin
    finally:
        context.reset_principal(token)
    assert context.current_user_id() is None
