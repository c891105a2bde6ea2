from __future__ import annotations

import pytest

from drupalci.model import REVIEW_CATEGORIES, ReviewConfig, review_categories
from drupalci.runner import CIError, StepFailure
from drupalci.step_workflows.review import ReviewStep, review_targets


def touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("name = x\n")
    return path


@pytest.fixture
def drupal(workspace):
    root = workspace / "drupal"
    touch(root / "a" / "b" / "mymodule.info")
    touch(root / "x" / "y" / "theme1.info")
    touch(root / "a" / "b" / "mymodule.module")
    return root


# ---------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------

def test_no_flags_no_categories():
    assert review_categories() == frozenset()


def test_all_flags_all_categories():
    flags = {name: True for name in REVIEW_CATEGORIES}
    assert review_categories(**flags) == frozenset(REVIEW_CATEGORIES)


def test_categories_follow_flags_only():
    assert review_categories(sql=True, style=True) == review_categories(style=True, sql=True) == {"style", "sql"}


def test_config_categories():
    assert ReviewConfig(security=True, i18n=True).categories == {"security", "i18n"}


# ---------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------

def test_targets_from_descriptor_files(drupal):
    assert review_targets(drupal) == {"mymodule", "theme1"}


def test_targets_are_stable_across_calls(drupal):
    assert review_targets(drupal) == review_targets(drupal)


def test_exclusion_removes_matching_paths(drupal):
    assert review_targets(drupal, "x/y/*") == {"mymodule"}


def test_exclusion_list_is_comma_or_space_separated(drupal):
    touch(drupal / "profiles" / "minimal" / "minimal.info")
    assert review_targets(drupal, "x/y/*, a/**") == {"minimal"}
    assert review_targets(drupal, "x/y/* a/**") == {"minimal"}


def test_installation_profiles_are_targets(drupal):
    touch(drupal / "profiles" / "standard" / "standard.info")
    assert "standard" in review_targets(drupal)


def test_vcs_directories_are_ignored(drupal):
    touch(drupal / ".git" / "hooks" / "bogus.info")
    assert review_targets(drupal) == {"mymodule", "theme1"}


# ---------------------------------------------------------------------
# Step
# ---------------------------------------------------------------------

def test_review_step_runs_one_batched_review(workspace, drupal, console, runners):
    config = ReviewConfig(root="drupal", logs="logs", style=True, security=True, **{"except": "x/y/*"})

    result = ReviewStep(runners).execute(config, workspace, console)

    assert result.ok
    assert runners.subcommands == ["pm-download", "pm-enable", "coder-review"]
    download, enable, review = runners.calls
    assert download[1:] == ("pm-download", "coder-7.x-2.5", "-y", "--destination=modules")
    assert enable[1:] == ("pm-enable", "coder_review", "-y")
    assert review[1:] == ("coder-review", "--checkstyle", "--reviews=security,style", "mymodule")


def test_review_report_written_to_logs(workspace, drupal, console, runners):
    ReviewStep(runners).execute(ReviewConfig(logs="reports/coder"), workspace, console)

    assert (workspace / "reports" / "coder" / "coder_review.xml").is_file()


def test_review_without_categories_passes_targets_only(workspace, drupal, console, runners):
    ReviewStep(runners).execute(ReviewConfig(), workspace, console)

    assert runners.calls[-1][1:] == ("coder-review", "--checkstyle", "mymodule", "theme1")


def test_missing_root_is_io_failure(workspace, console, runners):
    with pytest.raises(CIError) as exc:
        ReviewStep(runners).execute(ReviewConfig(root="nowhere"), workspace, console)

    assert exc.value.kind == "io_failure"
    assert runners.calls == []
    # logs dir is still created first
    assert (workspace / "logs").is_dir()


def test_review_failure_aborts(workspace, drupal, console, make_runners):
    runners = make_runners({"coder-review": 1})

    with pytest.raises(StepFailure) as exc:
        ReviewStep(runners).execute(ReviewConfig(), workspace, console)

    assert exc.value.step == "coder-review"


def test_download_failure_stops_before_review(workspace, drupal, console, make_runners):
    runners = make_runners({"pm-download": 1})

    with pytest.raises(StepFailure):
        ReviewStep(runners).execute(ReviewConfig(), workspace, console)

    assert runners.subcommands == ["pm-download"]
