"""
Tests for the income classifier.

Tests cover:
- Self-employed, alimony, base income and retired predicates
- Ordered other-income pattern table
- Predicates holding at the same time
"""
import pytest


def _borrower(income_types=(), employments=()):
    from mismo_checklist.models import Borrower, Income

    return Borrower(
        name="Test Borrower",
        incomes=[Income(income_type=t, monthly_amount=1000.0) for t in income_types],
        employments=list(employments),
    )


class TestPredicates:
    """Tests for the individual classifier predicates."""

    def test_self_employed_from_flag(self):
        from mismo_checklist.income_classifier import is_self_employed
        from mismo_checklist.models import Employment

        borrower = _borrower(employments=[Employment(employer_name="Own Co", is_self_employed=True)])

        assert is_self_employed(borrower) is True

    @pytest.mark.parametrize("income_type", [
        "SelfEmploymentIncome", "BusinessIncome", "PartnershipIncome",
        "S-Corp Distribution", "Schedule C", "1099 Contract",
    ])
    def test_self_employed_from_income_type(self, income_type):
        from mismo_checklist.income_classifier import is_self_employed

        assert is_self_employed(_borrower([income_type])) is True

    def test_not_self_employed(self):
        from mismo_checklist.income_classifier import is_self_employed

        assert is_self_employed(_borrower(["Base"])) is False

    @pytest.mark.parametrize("income_type", ["Alimony", "ChildSupport", "child support"])
    def test_alimony(self, income_type):
        from mismo_checklist.income_classifier import has_alimony

        assert has_alimony(_borrower([income_type])) is True

    @pytest.mark.parametrize("income_type", ["Base", "Hourly", "Salary", "MilitaryBasePay", "ContractBasis", "Wages"])
    def test_base_income(self, income_type):
        from mismo_checklist.income_classifier import has_base_income

        assert has_base_income(_borrower([income_type])) is True

    def test_base_income_set_is_exact(self):
        """Bonus alone is not base income."""
        from mismo_checklist.income_classifier import has_base_income

        assert has_base_income(_borrower(["Bonus"])) is False

    def test_retired_by_classification(self):
        from mismo_checklist.income_classifier import is_retired
        from mismo_checklist.models import Employment

        borrower = _borrower(employments=[Employment(classification_type="Retired")])

        assert is_retired(borrower) is True

    def test_retired_by_income_without_employment(self):
        from mismo_checklist.income_classifier import is_retired

        assert is_retired(_borrower(["SocialSecurity"])) is True

    def test_retirement_income_with_employment_is_not_retired(self):
        from mismo_checklist.income_classifier import is_retired
        from mismo_checklist.models import Employment

        borrower = _borrower(["Pension"], employments=[Employment(employer_name="Acme")])

        assert is_retired(borrower) is False

    def test_variable_income(self):
        from mismo_checklist.income_classifier import has_variable_income
        from mismo_checklist.models import Employment

        assert has_variable_income(_borrower(["Base", "Overtime"])) is True
        assert has_variable_income(_borrower(["Base"], [Employment(classification_type="PartTime")])) is True
        assert has_variable_income(_borrower(["Base"])) is False


class TestOtherIncome:
    """Tests for the ordered other-income table."""

    @pytest.mark.parametrize("income_type,expected", [
        ("CapitalGains", "capital_gains"),
        ("DividendsInterest", "dividend_interest"),
        ("FosterCare", "foster_care"),
        ("ForeignIncome", "foreign"),
        ("Unemployment", "unemployment"),
        ("Royalties", "royalties"),
        ("TrustIncome", "trust"),
        ("NotesReceivableInstallment", "note_receivable"),
        ("BoarderIncome", "boarder_income"),
    ])
    def test_category(self, income_type, expected):
        from mismo_checklist.income_classifier import classify_other_income
        from mismo_checklist.models import Income

        assert classify_other_income(Income(income_type=income_type)).value == expected

    def test_unknown_label_matches_nothing(self):
        from mismo_checklist.income_classifier import classify_other_income
        from mismo_checklist.models import Income

        assert classify_other_income(Income(income_type="MysteryMoney")) is None

    def test_first_matching_row_wins(self):
        """'Capital gain interest' hits capital gains before dividend/interest."""
        from mismo_checklist.constants import OtherIncomeCategory
        from mismo_checklist.income_classifier import classify_other_income
        from mismo_checklist.models import Income

        category = classify_other_income(Income(income_type="Capital gain interest"))

        assert category == OtherIncomeCategory.CAPITAL_GAINS

    def test_categories_are_distinct_and_ordered(self):
        from mismo_checklist.constants import OtherIncomeCategory
        from mismo_checklist.income_classifier import other_income_categories

        borrower = _borrower(["Trust", "Royalties", "TrustIncome", "Base"])

        assert other_income_categories(borrower) == [
            OtherIncomeCategory.TRUST,
            OtherIncomeCategory.ROYALTIES,
        ]


class TestClassifyBorrower:
    """Predicates are independent of each other."""

    def test_multiple_predicates_true(self):
        from mismo_checklist.income_classifier import classify_borrower
        from mismo_checklist.models import Employment

        borrower = _borrower(
            ["SelfEmploymentIncome", "Alimony", "Base"],
            [Employment(employer_name="Own Co", is_self_employed=True)],
        )
        profile = classify_borrower(borrower)

        assert profile.self_employed is True
        assert profile.alimony is True
        assert profile.base_income is True
        assert profile.retired is False
        assert profile.other_categories == []
