"""RuleConfig construction, normalization and validation."""

from dataclasses import FrozenInstanceError

import pytest

from balance_kernel.domain.rule_config import (
    DEFAULT_CHECKING_ACCOUNT_ID,
    DEFAULT_SAVINGS_ACCOUNT_ID,
    DesignatedAccounts,
    RuleConfig,
)
from balance_kernel.exceptions import ConfigError, InvalidRuleConfigError


class TestReferenceDefaults:
    def test_reference_ids(self):
        config = RuleConfig.reference_defaults()

        assert config.check_type_id == 3
        assert config.savings_type_id == 13
        assert config.credit_card_type_id == 8
        assert config.income_type_id == 3
        assert config.eligible_override_accounts(7) == frozenset({15, 16})

    def test_designated_defaults(self):
        designated = RuleConfig.reference_defaults().designated_accounts

        assert designated.checking_account_id == DEFAULT_CHECKING_ACCOUNT_ID == 15
        assert designated.savings_account_id == DEFAULT_SAVINGS_ACCOUNT_ID == 16

    def test_not_resolved_by_type_unless_asked(self):
        assert RuleConfig.reference_defaults().resolve_designated_by_type is False


class TestImmutability:
    def test_config_is_frozen(self, rule_config):
        with pytest.raises(FrozenInstanceError):
            rule_config.check_type_id = 4

    def test_overrides_are_read_only(self, rule_config):
        with pytest.raises(TypeError):
            rule_config.overrides[5] = frozenset({1})

    def test_overrides_are_copied_from_input(self):
        source = {5: [1, 2]}
        config = RuleConfig(overrides=source)
        source[5].append(3)
        source[6] = [4]

        assert config.eligible_override_accounts(5) == frozenset({1, 2})
        assert config.eligible_override_accounts(6) == frozenset()

    def test_with_changes_returns_a_copy(self, rule_config):
        changed = rule_config.with_changes(income_type_id=None)

        assert changed.income_type_id is None
        assert rule_config.income_type_id == 3
        assert dict(changed.overrides) == dict(rule_config.overrides)

    def test_config_is_hashable(self, rule_config):
        same = RuleConfig.reference_defaults()

        assert hash(rule_config) == hash(same)
        assert {rule_config: "reference"}[same] == "reference"


class TestValidation:
    @pytest.mark.parametrize("bad", [0, -3, True, "3", 3.0])
    def test_rejects_invalid_type_ids(self, bad):
        with pytest.raises(InvalidRuleConfigError) as exc_info:
            RuleConfig(check_type_id=bad)

        assert "check_type_id" in exc_info.value.errors[0]

    def test_collects_every_invalid_type_id(self):
        with pytest.raises(InvalidRuleConfigError) as exc_info:
            RuleConfig(check_type_id=0, income_type_id=-1)

        assert len(exc_info.value.errors) == 2

    @pytest.mark.parametrize(
        "overrides",
        [
            {0: [1]},
            {"7": [1]},
            {7: "16"},
            {7: [16, 0]},
            {7: [True]},
            {7: 16},
        ],
    )
    def test_rejects_invalid_overrides(self, overrides):
        with pytest.raises(InvalidRuleConfigError):
            RuleConfig(overrides=overrides)

    def test_rejects_non_mapping_overrides(self):
        with pytest.raises(InvalidRuleConfigError):
            RuleConfig(overrides=[(7, [16])])

    @pytest.mark.parametrize("bad", [0, -15, False, "15"])
    def test_rejects_invalid_designated_ids(self, bad):
        with pytest.raises(InvalidRuleConfigError):
            DesignatedAccounts(checking_account_id=bad)

    def test_designated_ids_may_be_unset(self):
        designated = DesignatedAccounts(checking_account_id=None, savings_account_id=None)

        assert designated.checking_account_id is None

    def test_error_is_a_config_error_with_code(self):
        with pytest.raises(ConfigError) as exc_info:
            RuleConfig(savings_type_id=-1)

        assert exc_info.value.code == "INVALID_RULE_CONFIG"


class TestDescribe:
    def test_describe_is_plain_data(self, rule_config):
        described = rule_config.describe()

        assert described == {
            "check_type_id": 3,
            "savings_type_id": 13,
            "credit_card_type_id": 8,
            "income_type_id": 3,
            "overrides": {"7": [15, 16]},
            "designated_accounts": {"checking": 15, "savings": 16},
            "resolve_designated_by_type": False,
        }

    def test_unknown_type_has_no_eligible_accounts(self, rule_config):
        assert rule_config.eligible_override_accounts(None) == frozenset()
        assert rule_config.eligible_override_accounts(42) == frozenset()
