"""
Unit tests for the score engine (legacy and advanced strategies).
"""

from services.findings import (
    AdvancedFindings, LegacyFindings, LegacyIssue, extract_advanced_findings,
)
from services.score_engine import AdvancedScorer, LegacyScorer, finalize_score


class TestFinalizeScore:

    def test_no_deductions_is_perfect(self):
        assert finalize_score({}).overall_score == 100

    def test_clamped_at_zero(self):
        assert finalize_score({"a": 80, "b": 80}).overall_score == 0

    def test_breakdown_is_kept(self):
        result = finalize_score({"acne": 4, "pores": 3})
        assert result.overall_score == 93
        assert result.breakdown == {"acne": 4, "pores": 3}


class TestLegacyScorer:

    def test_severity_deductions(self):
        findings = LegacyFindings(issues=(
            LegacyIssue("acne", "痘痘", 3),
            LegacyIssue("dark_circle", "黑眼圈", 2),
            LegacyIssue("mole", "痣", 1),
        ))
        result = LegacyScorer().score(findings)
        assert result.breakdown["acne"] == 15
        assert result.breakdown["dark_circle"] == 10
        assert result.breakdown["mole"] == 5
        assert result.overall_score == 70

    def test_wrinkles_and_pores(self):
        findings = LegacyFindings(wrinkles=("抬头纹", "鱼尾纹"), pores=("额头毛孔",))
        result = LegacyScorer().score(findings)
        assert result.breakdown["wrinkles"] == 10
        assert result.breakdown["pores"] == 3
        assert result.overall_score == 87


class TestAdvancedScorer:

    def test_empty_findings_score_100(self):
        assert AdvancedScorer().score(AdvancedFindings()).overall_score == 100

    def test_concerns_breakdown(self, concerns_raw, face_rectangle):
        findings = extract_advanced_findings(concerns_raw, face_rectangle)
        result = AdvancedScorer().score(findings)

        assert result.breakdown["blackhead"] == 10
        assert result.breakdown["acne"] == 4
        assert result.breakdown["pores"] == 4
        assert result.breakdown["dark_circle"] == 7
        assert result.breakdown["wrinkles"] == 4
        assert result.overall_score == 71

    def test_caps_apply_per_category(self):
        findings = AdvancedFindings(acne_count=50, mole_count=50, closed_comedones_count=50)
        breakdown = AdvancedScorer().deductions(findings)
        assert breakdown["acne"] == 20
        assert breakdown["mole"] == 5
        assert breakdown["closed_comedones"] == 10

    def test_sensitivity_only_when_reported(self):
        assert AdvancedScorer().deductions(AdvancedFindings())["sensitivity"] == 0
        findings = AdvancedFindings(sensitivity_area=0.1, sensitivity_intensity=65)
        assert AdvancedScorer().deductions(findings)["sensitivity"] == 3

    def test_out_of_table_blackhead_grade_uses_highest(self):
        breakdown = AdvancedScorer().deductions(AdvancedFindings(blackhead_grade=5))
        assert breakdown["blackhead"] == 15
