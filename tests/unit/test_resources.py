"""
Unit tests for thread, draft, label, history and watch resources
"""
import unittest
from unittest.mock import MagicMock

import pytest

from gfa.auth import TokenNotValidError
from gfa.exceptions import PreconditionError
from gfa.gmail import (
    Draft,
    GmailClient,
    GmailDraft,
    GmailHistory,
    GmailLabel,
    GmailThread,
    HistoryAction,
    LabelListVisibility,
    PaginatedResource,
)
from gfa.gmail.labels import label_body


class TestThreads:
    """Test cases for threads"""

    @pytest.fixture
    def threads_api(self, service, helpers):
        threads_api = service.users.return_value.threads.return_value
        threads_api.get.side_effect = lambda **kwargs: helpers.make_request({
            "id": kwargs["id"],
            "historyId": "55",
            "snippet": "latest",
            "messages": [
                helpers.message(message_id=f"{kwargs['id']}-1", thread_id=kwargs["id"]),
                helpers.message(message_id=f"{kwargs['id']}-2", thread_id=kwargs["id"]),
            ],
        })
        return threads_api

    def test_list(self, client, threads_api, helpers):
        threads_api.list.return_value = helpers.make_request({
            "threads": [{"id": "t1"}, {"id": "t2"}],
            "resultSizeEstimate": 2,
        })

        page = client.threads().label("work").list()

        threads_api.list.assert_called_once_with(userId="me", maxResults="20", q="label:work")
        assert [t.id for t in page] == ["t1", "t2"]
        assert [m.id for m in page[0].messages] == ["t1-1", "t1-2"]
        assert not page.has_next_page()

    def test_modify_refetches(self, client, threads_api, helpers):
        threads_api.modify.return_value = helpers.make_request({"id": "t1"})
        thread = client.threads().get("t1")
        assert threads_api.get.call_count == 1

        result = thread.add_labels("STARRED")

        assert result is thread
        threads_api.modify.assert_called_once_with(
            userId="me", id="t1", body={"addLabelIds": ["STARRED"]}
        )
        assert threads_api.get.call_count == 2

    def test_trash_by_id(self, client, threads_api, helpers):
        threads_api.trash.return_value = helpers.make_request({"id": "t9"})
        thread = client.threads().trash("t9")
        assert isinstance(thread, GmailThread)
        threads_api.trash.assert_called_once_with(userId="me", id="t9")

    def test_delete(self, client, threads_api, helpers):
        threads_api.delete.return_value = helpers.make_request("")
        client.threads().delete("t5")
        threads_api.delete.assert_called_once_with(userId="me", id="t5")


class TestDraftResource:
    """Test cases for listing and editing drafts"""

    @pytest.fixture
    def drafts_api(self, service, helpers):
        drafts_api = service.users.return_value.drafts.return_value
        drafts_api.get.side_effect = lambda **kwargs: helpers.make_request({
            "id": kwargs["id"],
            "message": helpers.message(
                message_id=f"msg-{kwargs['id']}",
                headers={"Subject": f"Draft {kwargs['id']}"},
            ),
        })
        return drafts_api

    def test_list(self, client, drafts_api, helpers):
        drafts_api.list.return_value = helpers.make_request({
            "drafts": [{"id": "d1", "message": {"id": "msg-d1"}}],
            "resultSizeEstimate": 1,
        })
        page = client.drafts().list()
        assert [d.id for d in page] == ["d1"]
        assert page[0].message.subject == "Draft d1"

    def test_create_and_edit(self, client, drafts_api):
        resource = client.drafts()
        assert isinstance(resource.create(), Draft)

        builder = resource.edit("d7")
        assert isinstance(builder.draft, GmailDraft)
        assert builder.email_subject == "Draft d7"

    def test_send_existing(self, client, drafts_api, service, helpers):
        drafts_api.send.return_value = helpers.make_request({"id": "sent"})
        messages_api = service.users.return_value.messages.return_value
        messages_api.get.return_value = helpers.make_request(helpers.message(message_id="sent"))

        sent = client.drafts().get("d1").send()

        drafts_api.send.assert_called_once_with(userId="me", body={"id": "d1"})
        assert sent.id == "sent"

    def test_delete(self, client, drafts_api, helpers):
        drafts_api.delete.return_value = helpers.make_request("")
        client.drafts().delete("d1")
        drafts_api.delete.assert_called_once_with(userId="me", id="d1")


class TestLabels:
    """Test cases for labels"""

    label_payload = {
        "id": "Label_1",
        "name": "Work",
        "type": "user",
        "messageListVisibility": "show",
        "labelListVisibility": "labelShow",
        "messagesTotal": 12,
        "messagesUnread": 3,
        "threadsTotal": 10,
        "threadsUnread": 2,
        "color": {"textColor": "#000000", "backgroundColor": "#ffffff"},
    }

    @pytest.fixture
    def labels_api(self, service, helpers):
        labels_api = service.users.return_value.labels.return_value
        labels_api.get.side_effect = lambda **kwargs: helpers.make_request(
            dict(self.label_payload, id=kwargs["id"])
        )
        return labels_api

    def test_from_api(self):
        label = GmailLabel.from_api(self.label_payload)
        assert label.name == "Work"
        assert label.type == "user"
        assert label.messages_unread == 3
        assert label.text_color == "#000000"
        assert label.background_color == "#ffffff"

    def test_system_label(self):
        label = GmailLabel.from_api({"id": "INBOX", "name": "INBOX", "type": "system"})
        assert label.type == "system"
        assert label.text_color is None

    def test_list_hydrates_with_batch(self, client, labels_api, service, helpers):
        labels_api.list.return_value = helpers.make_request(
            {"labels": [{"id": "Label_1"}, {"id": "Label_2"}]}
        )
        labels = client.labels().list()
        assert [label.id for label in labels] == ["Label_1", "Label_2"]
        service.new_batch_http_request.assert_called_once()

    def test_create(self, client, labels_api, helpers):
        labels_api.create.return_value = helpers.make_request({"id": "Label_9"})
        label = client.labels().create({
            "name": "Receipts",
            "label_list_visibility": LabelListVisibility.LABEL_SHOW,
            "background_color": "#ffffff",
        })
        labels_api.create.assert_called_once_with(
            userId="me",
            body={
                "name": "Receipts",
                "labelListVisibility": "labelShow",
                "color": {"backgroundColor": "#ffffff"},
            },
        )
        assert label.id == "Label_9"

    def test_update(self, client, labels_api, helpers):
        labels_api.update.return_value = helpers.make_request({"id": "Label_1"})
        client.labels().update("Label_1", {"name": "Renamed"})
        labels_api.update.assert_called_once_with(
            userId="me", id="Label_1", body={"name": "Renamed", "id": "Label_1"}
        )

    def test_label_body_ignores_unknown_keys(self):
        assert label_body({"colour": "red"}) == {}


class TestHistory:
    """Test cases for history listing"""

    def test_requires_start_history_id(self, client):
        with pytest.raises(PreconditionError):
            client.history().list()

    def test_list_and_next(self, client, service, helpers):
        history_api = service.users.return_value.history.return_value
        responses = {
            None: {
                "history": [
                    {"id": "101", "messages": [{"id": "m1"}],
                     "messagesAdded": [{"message": {"id": "m1"}}]},
                ],
                "nextPageToken": "H1",
            },
            "H1": {
                "history": [
                    {"id": "102", "labelsAdded": [{"message": {"id": "m1"}, "labelIds": ["X"]}]},
                ],
            },
        }
        history_api.list.side_effect = lambda **kwargs: helpers.make_request(
            responses[kwargs.get("pageToken")]
        )

        resource = (
            client.history()
            .start_history_id(100)
            .label_id("INBOX")
            .history_types([HistoryAction.MESSAGE_ADDED, "labelAdded"])
        )
        first = resource.list()

        history_api.list.assert_called_with(
            userId="me",
            maxResults=100,
            labelId="INBOX",
            historyTypes=["messageAdded", "labelAdded"],
            startHistoryId="100",
        )
        assert [h.id for h in first] == ["101"]
        assert first[0].action == HistoryAction.MESSAGE_ADDED
        assert first.has_next_page()

        second = first.next()
        assert second[0].action == HistoryAction.LABELS_ADDED
        assert first.has_next_page()
        assert first.next_page_token == "H1"
        assert not second.has_next_page()
        assert list(second.next()) == []
        assert history_api.list.call_count == 2


class TestHistoryRecord(unittest.TestCase):
    """Test cases for history record actions"""

    def test_last_non_empty_change_wins(self):
        record = GmailHistory.from_api({
            "id": 7,
            "messagesAdded": [{"message": {"id": "a"}}],
            "labelsRemoved": [{"message": {"id": "a"}, "labelIds": ["UNREAD"]}],
        })
        self.assertEqual(record.id, "7")
        self.assertEqual(record.action, HistoryAction.LABELS_REMOVED)

    def test_no_changes(self):
        self.assertIsNone(GmailHistory.from_api({"id": "8"}).action)


class TestWatch:
    """Test cases for push notifications"""

    def test_start_requires_topic(self, client):
        with pytest.raises(PreconditionError):
            client.watch().start()

    def test_start_and_stop(self, settings, service, helpers):
        settings.gmail.pub_sub_topic = "projects/demo/topics/gmail"
        client = GmailClient(settings=settings, service=service)
        users = service.users.return_value
        users.watch.return_value = helpers.make_request({"historyId": "1", "expiration": "2"})
        users.stop.return_value = helpers.make_request("")

        response = client.watch().start(["INBOX"], "include")

        users.watch.assert_called_once_with(
            userId="me",
            body={
                "topicName": "projects/demo/topics/gmail",
                "labelIds": ["INBOX"],
                "labelFilterBehavior": "include",
            },
        )
        assert response["historyId"] == "1"

        client.watch().stop()
        users.stop.assert_called_once_with(userId="me")

    def test_requires_authentication(self, settings):
        client = GmailClient(credentials=MagicMock(valid=False, refresh_token=None), settings=settings)
        with pytest.raises(TokenNotValidError):
            client.watch()


class TestResourceOverrides:
    """Test cases for the list resource base class"""

    def test_hooks_must_be_overridden(self, client):
        resource = PaginatedResource(client)
        with pytest.raises(NotImplementedError):
            resource.list()
        with pytest.raises(NotImplementedError):
            resource.get("x")
