"""
Unit tests for outgoing emails and drafts
"""
import email
from email import policy

import pytest

from gfa.exceptions import InvalidEmbedError, InvalidRecipientError, PreconditionError
from gfa.gmail import Draft, Email, GmailClient, GmailDraft, GmailMessage, SendableEmbed
from gfa.gmail.extract import decode_base64url
from gfa.gmail.models import MessageRecipient


def _parse_raw(body):
    """Parse the raw MIME message of a request body."""
    return email.message_from_bytes(decode_base64url(body["raw"]), policy=policy.default)


@pytest.fixture
def storage(settings):
    directory = settings.app.storage_dir
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "report.pdf").write_bytes(b"%PDF-1.4 test")
    (directory / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\nfake")
    return directory


@pytest.fixture
def source_message(client, helpers):
    return GmailMessage(
        helpers.message(
            message_id="orig",
            thread_id="thread42",
            headers={
                "Subject": "Project plan",
                "Message-ID": "<orig@mail.example.com>",
                "References": "<root@mail.example.com>",
            },
        ),
        client,
    )


class TestRecipients:
    """Test cases for recipient setters"""

    def test_accepts_strings_tuples_and_recipients(self, client):
        outgoing = Email(client).to(
            "a@example.com",
            ("b@example.com", "Bee"),
            ["c@example.com"],
            MessageRecipient(email="d@example.com", name="Dee"),
        )
        assert [r.email for r in outgoing.to_recipients] == [
            "a@example.com", "b@example.com", "c@example.com", "d@example.com"
        ]
        assert outgoing.to_recipients[1].name == "Bee"

    def test_set_replaces_and_add_appends(self, client):
        outgoing = Email(client).cc("a@example.com").cc("b@example.com").add_cc("c@example.com")
        assert [r.email for r in outgoing.cc_recipients] == ["b@example.com", "c@example.com"]

    def test_invalid_address_raises_at_call(self, client):
        outgoing = Email(client)
        with pytest.raises(InvalidRecipientError):
            outgoing.bcc("ok@example.com", "not-an-address")
        assert outgoing.bcc_recipients == []


class TestMimeMessage:
    """Test cases for assembling the MIME message"""

    def test_headers_and_body(self, client):
        outgoing = (
            Email(client)
            .to(("bob@example.com", "Bob"))
            .cc("carol@example.com")
            .bcc("dave@example.com")
            .subject("Hi")
            .priority(1)
            .body("<p>Hello</p>")
            .set_header("X-Campaign", "test")
        )
        body = outgoing.to_message_body()
        assert "threadId" not in body

        parsed = _parse_raw(body)
        assert parsed["From"] == "Me Myself <me@example.com>"
        assert parsed["To"] == "Bob <bob@example.com>"
        assert parsed["Cc"] == "carol@example.com"
        assert parsed["Bcc"] == "dave@example.com"
        assert parsed["Subject"] == "Hi"
        assert parsed["X-Priority"] == "1 (Highest)"
        assert parsed["X-Campaign"] == "test"
        assert parsed.get_content_type() == "text/html"
        assert "<p>Hello</p>" in parsed.get_content()

    def test_bare_address_without_configured_name(self, settings, service):
        settings.gmail.from_name = None
        client = GmailClient(settings=settings, service=service)

        parsed = _parse_raw(Email(client).to("bob@example.com").to_message_body())

        assert parsed["From"] == "me@example.com"
        assert Email(client).set_my_name("Explicit").from_name == "Explicit"

    def test_priority_is_clamped(self, client):
        assert Email(client).priority(9).email_priority == 5
        assert Email(client).priority(0).email_priority == 1

    def test_attachments_and_embeds(self, client, storage):
        outgoing = (
            Email(client)
            .to("bob@example.com")
            .body('<img src="cid:logo">')
            .attach("report.pdf")
            .embed(("logo.png", "logo"))
        )
        parsed = _parse_raw(outgoing.to_message_body())
        assert parsed.get_content_type() == "multipart/mixed"

        parts = list(parsed.walk())
        attachment = next(p for p in parts if p.get_filename() == "report.pdf")
        assert attachment.get_content_type() == "application/pdf"
        assert attachment.get_content() == b"%PDF-1.4 test"

        inline = next(p for p in parts if p["Content-ID"] == "<logo>")
        assert inline.get_content_type() == "image/png"
        assert any(p.get_content_type() == "multipart/related" for p in parts)

    def test_missing_attachment_file(self, client, storage):
        with pytest.raises(FileNotFoundError):
            Email(client).attach("missing.pdf")

    def test_embed_must_be_a_pair(self, client, storage):
        with pytest.raises(InvalidEmbedError):
            Email(client).embed(("logo.png",))
        with pytest.raises(InvalidEmbedError):
            Email(client).add_embed("logo.png")

    def test_embed_object(self, client, storage, settings):
        embed = SendableEmbed("logo.png", "logo", settings=settings)
        assert Email(client).embed(embed).embeds == [embed]


class TestReplies:
    """Test cases for replies and forwards"""

    def test_reply_stays_on_thread(self, client, source_message):
        reply = source_message.create_reply()
        assert isinstance(reply, Email)
        assert reply.thread_id == "thread42"
        assert reply.email_subject == "Project plan"

        body = reply.to("alice@example.com").body("Sounds good").to_message_body()
        assert body["threadId"] == "thread42"
        parsed = _parse_raw(body)
        assert parsed["In-Reply-To"] == "<orig@mail.example.com>"
        assert parsed["References"] == "<root@mail.example.com> <orig@mail.example.com>"

    def test_forward_without_source(self, client):
        with pytest.raises(PreconditionError):
            Email(client).create_forward()

    def test_send_returns_fetched_message(self, client, service, helpers):
        messages_api = service.users.return_value.messages.return_value
        messages_api.send.return_value = helpers.make_request({"id": "sent1"})
        messages_api.get.return_value = helpers.make_request(helpers.message(message_id="sent1"))

        sent = Email(client).to("bob@example.com").subject("Hi").send()

        assert isinstance(sent, GmailMessage)
        assert sent.id == "sent1"
        kwargs = messages_api.send.call_args.kwargs
        assert kwargs["userId"] == "me"
        assert _parse_raw(kwargs["body"])["Subject"] == "Hi"
        messages_api.get.assert_called_once_with(userId="me", id="sent1", format="full")


class TestDrafts:
    """Test cases for the draft builder"""

    @pytest.fixture
    def drafts_api(self, service, helpers):
        drafts_api = service.users.return_value.drafts.return_value
        drafts_api.get.side_effect = lambda **kwargs: helpers.make_request({
            "id": kwargs["id"],
            "message": helpers.message(message_id=f"msg-{kwargs['id']}"),
        })
        return drafts_api

    def test_store(self, client, drafts_api, helpers):
        drafts_api.create.return_value = helpers.make_request({"id": "d1"})
        draft = Draft(client).to("bob@example.com").subject("Later").store()

        assert isinstance(draft, GmailDraft)
        assert draft.id == "d1"
        body = drafts_api.create.call_args.kwargs["body"]
        assert _parse_raw(body["message"])["Subject"] == "Later"

    def test_update_needs_existing_draft(self, client):
        with pytest.raises(PreconditionError):
            Draft(client).update()

    def test_save_updates_existing(self, client, drafts_api, helpers):
        existing = GmailDraft({"id": "d2", "message": helpers.message(message_id="m2")}, client)
        drafts_api.update.return_value = helpers.make_request({"id": "d2"})

        saved = Draft(client, draft=existing).subject("Changed").save()

        assert saved.id == "d2"
        kwargs = drafts_api.update.call_args.kwargs
        assert kwargs["id"] == "d2"
        assert kwargs["body"]["id"] == "d2"
        drafts_api.create.assert_not_called()

    def test_hydrate_copies_message(self, client, helpers):
        existing = GmailDraft(
            {
                "id": "d3",
                "message": helpers.message(
                    message_id="m3",
                    thread_id="t3",
                    headers={
                        "From": "Someone Else <me@example.com>",
                        "To": "bob@example.com",
                        "Cc": "carol@example.com",
                        "Subject": "Draft subject",
                        "In-Reply-To": "<parent@x>",
                        "References": "<root@x> <parent@x>",
                    },
                    parts=[helpers.text_part("text/html", "<p>draft</p>")],
                ),
            },
            client,
        )

        builder = existing.edit()

        assert isinstance(builder, Draft)
        assert builder.from_name == "Someone Else"
        assert [r.email for r in builder.to_recipients] == ["bob@example.com"]
        assert [r.email for r in builder.cc_recipients] == ["carol@example.com"]
        assert builder.email_subject == "Draft subject"
        assert builder.email_body == "<p>draft</p>"
        assert builder.thread_id == "t3"
        assert builder.headers == {"In-Reply-To": "<parent@x>", "References": "<root@x> <parent@x>"}

    def test_send_draft_builder(self, client, drafts_api, service, helpers):
        existing = GmailDraft({"id": "d4", "message": helpers.message(message_id="m4")}, client)
        drafts_api.send.return_value = helpers.make_request({"id": "sent4"})
        messages_api = service.users.return_value.messages.return_value
        messages_api.get.return_value = helpers.make_request(helpers.message(message_id="sent4"))

        sent = Draft(client, draft=existing).to("bob@example.com").send()

        assert sent.id == "sent4"
        assert drafts_api.send.call_args.kwargs["body"]["id"] == "d4"

    def test_draft_reply(self, client, source_message):
        draft = source_message.create_draft()
        assert isinstance(draft, Draft)
        assert draft.thread_id == "thread42"
        assert draft.headers["In-Reply-To"] == "<orig@mail.example.com>"
