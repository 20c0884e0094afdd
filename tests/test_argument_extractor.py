"""Tests for per-command argument extraction."""

import pytest

from modrouter.command.argument_extractor import (
    BAN_REASON_DEFAULT,
    extract_arguments,
    extract_ban,
    extract_mute,
    extract_unban,
    extract_unmute,
    join_reason,
    parse_user_ids,
    split_fields,
)
from modrouter.datatypes.privilege_datatypes import CommandKind


class TestParseUserIds:

    def test_duplicates_removed_in_first_occurrence_order(self):
        assert parse_user_ids("5,3,5,3") == ["5", "3"]

    def test_single_id(self):
        assert parse_user_ids("42") == ["42"]

    def test_blank_entries_dropped(self):
        assert parse_user_ids("1,,2,") == ["1", "2"]

    def test_empty_token_yields_no_users(self):
        assert parse_user_ids("") == []
        assert parse_user_ids(",,") == []


class TestSplitFields:

    def test_pads_missing_fields(self):
        assert split_fields("-m 10", 4) == ["-m", "10", "", ""]

    def test_remainder_kept_in_last_field(self):
        assert split_fields("-b 1 a b c", 3) == ["-b", "1", "a b c"]


def test_join_reason_adds_trailing_space():
    assert join_reason("reason text here") == "reason text here "
    assert join_reason("") == ""
    assert join_reason("   ") == ""


class TestBan:

    def test_users_and_reason(self):
        args = extract_ban("-b 10,11 spam links")
        assert args.users == ["10", "11"]
        assert args.reason == "spam links "
        assert args.duration == ""

    def test_reason_defaults_to_none_marker(self):
        args = extract_ban("-b 10")
        assert args.users == ["10"]
        assert args.reason == BAN_REASON_DEFAULT

    def test_truncated_command_has_no_users(self):
        args = extract_ban("-b")
        assert args.users == []
        assert args.reason == BAN_REASON_DEFAULT


class TestUnban:

    def test_users_only(self):
        args = extract_unban("-ub 1,2,1")
        assert args.users == ["1", "2"]
        assert args.reason == ""

    def test_trailing_text_ignored(self):
        assert extract_unban("-ub 1 appeal accepted").users == ["1"]

    def test_truncated(self):
        assert extract_unban("-ub").users == []


class TestMute:

    def test_full_command(self):
        args = extract_mute("-m 10,20,10 1d reason text here")
        assert args.users == ["10", "20"]
        assert args.duration == "1d"
        assert args.reason == "reason text here "

    def test_missing_reason_is_empty(self):
        args = extract_mute("-m 10 1d")
        assert args.duration == "1d"
        assert args.reason == ""

    def test_missing_duration_and_reason(self):
        args = extract_mute("-m 10")
        assert args.users == ["10"]
        assert args.duration == ""
        assert args.reason == ""

    def test_truncated(self):
        args = extract_mute("-m")
        assert args.users == []


class TestUnmute:

    def test_users_only(self):
        assert extract_unmute("-um 7,8").users == ["7", "8"]

    def test_truncated(self):
        assert extract_unmute("-um").users == []


def test_extract_arguments_dispatches_by_kind():
    assert extract_arguments(CommandKind.MUTE, "-m 1 2h proof").duration == "2h"
    assert extract_arguments(CommandKind.BAN, "-b 1").reason == BAN_REASON_DEFAULT


def test_extract_arguments_rejects_kinds_without_arguments():
    with pytest.raises(KeyError):
        extract_arguments(CommandKind.HELP, "-?")
