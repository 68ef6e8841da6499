from salarytax.backend.config import validator
from salarytax.backend.config.schema import ConfigurationError
from salarytax.backend.config.validator import (
    main,
    validate_all_years,
    validate_bracket_set,
    validate_year_brackets,
)
from salarytax.backend.config.year_config import TaxBracket, load_year_brackets


def _brackets(*bands: tuple[float, float | None, float]) -> list[TaxBracket]:
    return [TaxBracket(min=lower, max=upper, rate=rate) for lower, upper, rate in bands]


def test_current_configurations_are_valid() -> None:
    results = validate_all_years()
    assert set(results) == {2019, 2020, 2021, 2022}
    assert all(not issues for issues in results.values()), results


def test_unsorted_contiguous_set_is_valid() -> None:
    brackets = _brackets((50_000, None, 0.3), (0, 50_000, 0.1))

    assert validate_bracket_set(brackets) == []


def test_validator_flags_empty_set() -> None:
    assert validate_bracket_set([]) == ["tax_brackets: at least one tax bracket must be defined"]


def test_validator_flags_gap_and_overlap() -> None:
    gap = validate_bracket_set(_brackets((0, 40_000, 0.1), (50_000, None, 0.2)))
    overlap = validate_bracket_set(_brackets((0, 60_000, 0.1), (50_000, None, 0.2)))

    assert any("gap between" in issue for issue in gap)
    assert any("overlap between" in issue for issue in overlap)


def test_validator_flags_multiple_open_ended_brackets() -> None:
    errors = validate_bracket_set(_brackets((0, None, 0.1), (50_000, None, 0.2)))

    assert any("at most one is allowed" in issue for issue in errors)
    assert any("is followed by" in issue for issue in errors)


def test_validator_flags_rates_and_degenerate_bands() -> None:
    errors = validate_bracket_set(
        _brackets((0, 50_000, 1.5), (50_000, 40_000, 0.2), (40_000, None, -0.1))
    )

    assert any("rate 1.5 must be between 0 and 1" in issue for issue in errors)
    assert any("upper bound must exceed its lower bound" in issue for issue in errors)
    assert any("rate -0.1 must be between 0 and 1" in issue for issue in errors)


def test_validator_flags_finite_top_and_offset_start() -> None:
    errors = validate_bracket_set(_brackets((1_000, 50_000, 0.1)))

    assert "tax_brackets: final tax bracket must have an open upper bound" in errors
    assert any("starts at 1000 instead of 0" in issue for issue in errors)


def test_validator_flags_invalid_currency() -> None:
    config = load_year_brackets(2022)
    broken = config.model_copy(update={"currency": "DOLLARS"})

    errors = validate_year_brackets(broken)

    assert any(issue.startswith("currency:") for issue in errors)


def test_main_reports_ok_for_configured_years(capsys) -> None:
    exit_code = main(["2021", "2022"])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert "[2021] OK" in output
    assert "[2022] OK" in output


def test_main_reports_unknown_year(capsys) -> None:
    exit_code = main(["1999"])

    assert exit_code == 1
    assert "[1999] failed to load configuration" in capsys.readouterr().out


def test_main_reports_malformed_year_file(capsys, monkeypatch) -> None:
    def broken_year(year: int) -> None:
        raise ConfigurationError(f"Configuration validation failed for {year}")

    monkeypatch.setattr(validator, "load_year_brackets", broken_year)

    exit_code = main(["2022"])

    assert exit_code == 1
    assert (
        "[2022] failed to load configuration: Configuration validation failed for 2022"
        in capsys.readouterr().out
    )
