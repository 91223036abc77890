from __future__ import annotations

from schedule_desktop.models import RouteGroup, Trip
from schedule_desktop.routes import (OTHER_CATEGORY, compute_stats, get_category, get_route_color,
                                     has_special_code, match_route_group)
from schedule_desktop.settings_store import default_route_groups


def test_default_categories():
    groups = default_route_groups()
    assert get_category("WD", groups) == "London"
    assert get_category("ZZ", groups) == OTHER_CATEGORY
    assert get_category("WD+LA", groups) == "London"
    assert get_category("ll", groups) == "Wales"
    assert get_category("", groups) == OTHER_CATEGORY


def test_full_match_groups_need_the_whole_route():
    groups = default_route_groups()
    assert get_category("EDINBURGH", groups) == "2DT"
    assert get_category("EX + TR", groups) == "2DT"
    assert get_category("EX", groups) == "South West"


def test_first_matching_group_wins():
    groups = [RouteGroup("A", ["wd"]), RouteGroup("B", ["WD"])]
    assert match_route_group("WD", groups).name == "A"
    assert match_route_group("HA", groups) is None


def test_route_color():
    groups = default_route_groups()
    assert get_route_color("WD ", groups) == "text-purple-500"
    assert get_route_color("ZZ", groups) == "text-gray-300"
    assert get_route_color("ZZ", groups, default="") == ""


def test_special_codes():
    assert has_special_code("Van-NW: LA+WD (3)")
    assert not has_special_code("Van-SW: EX+TR (3)")
    assert has_special_code("Van-SW: EX+TR+LA (2)")
    assert has_special_code("Van-SW: EX (2)")
    assert not has_special_code("Van: WD (1)")
    assert not has_special_code(None)


def test_compute_stats():
    groups = default_route_groups()
    trips = [
        Trip("1", calendar_name="V-A: WD (1)", is_assigned=True),
        Trip("2", calendar_name="V-A: ZZ (1)"),
        Trip("3", calendar_name="V-A: LL (2)"),
        Trip("4", calendar_name="V-A: HA (2)"),
    ]
    stats = compute_stats(trips, groups)
    assert stats["total"] == 4
    assert stats["assigned"] == 1
    assert stats["counts"] == {"London": 2, "Other": 1, "Wales": 1}
