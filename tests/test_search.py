"""Tests for doctor search and filter options."""
import pytest

from doctor_finder.errors import RecordShapeError
from doctor_finder.schemas.doctor import DoctorRecord, SearchFilters
from doctor_finder.services.search import (
    apply_filters,
    distinct_filter_values,
    matches_query,
    run_search,
    search_doctors,
)


def ids(records):
    return [record.id for record in records]


class TestFreeTextQuery:
    """Case-insensitive substring match across searchable fields."""

    def test_matches_insurance_case_insensitive(self, doctors):
        assert ids(search_doctors(doctors, "cigna")) == ["doc-1"]

    def test_matches_any_listed_insurance(self, doctors):
        assert ids(search_doctors(doctors, "AETNA")) == ["doc-1", "doc-3"]

    def test_matches_spoken_language(self, doctors):
        assert ids(search_doctors(doctors, "mandarin")) == ["doc-2"]

    def test_matches_partial_name(self, doctors):
        assert ids(search_doctors(doctors, "rahm")) == ["doc-3"]

    def test_matches_zip_code(self, doctors):
        assert ids(search_doctors(doctors, "762")) == ["doc-2"]

    def test_matches_clinic_and_city(self, doctors):
        # doc-1 and doc-3 are in Dallas; doc-3's clinic name also says Dallas
        assert ids(search_doctors(doctors, "dallas")) == ["doc-1", "doc-3"]

    def test_matches_degree_and_state(self, doctors):
        assert ids(search_doctors(doctors, "do")) == ["doc-2"]
        assert "doc-4" not in ids(search_doctors(doctors, "tx"))

    def test_sparse_record_matched_by_present_field(self, doctors):
        assert ids(search_doctors(doctors, "tom")) == ["doc-4"]

    def test_no_match(self, doctors):
        assert search_doctors(doctors, "orthopedics") == []

    def test_surrounding_spaces_are_part_of_the_query(self):
        yorktown = [DoctorRecord(city="Yorktown")]

        assert search_doctors(yorktown, " town") == []
        assert search_doctors(yorktown, "york ") == []
        assert search_doctors(yorktown, "york") == yorktown

    def test_inner_space_matches_multiword_values(self, doctors):
        assert ids(search_doctors(doctors, "family med")) == ["doc-2"]

    def test_matches_query_on_empty_record(self):
        assert matches_query(DoctorRecord(), "anything") is False


class TestStructuredFilters:
    """Exact-match filters applied before the query."""

    def test_city_filter(self, doctors):
        result = search_doctors(doctors, "", SearchFilters(city="Dallas"))

        assert ids(result) == ["doc-1", "doc-3"]

    def test_insurance_filter_is_membership(self, doctors):
        result = apply_filters(doctors, SearchFilters(insurance="Aetna"))

        assert ids(result) == ["doc-1", "doc-3"]

    def test_insurance_filter_is_exact(self, doctors):
        assert apply_filters(doctors, SearchFilters(insurance="aetna")) == []

    def test_filters_are_anded(self, doctors):
        filters = SearchFilters(city="Dallas", specialty="Dermatology", insurance="Aetna")

        assert ids(apply_filters(doctors, filters)) == ["doc-3"]

    def test_filters_then_query(self, doctors):
        result = search_doctors(doctors, "spanish", SearchFilters(city="Denton"))

        assert result == []

    def test_unset_filters_pass_through(self, doctors):
        assert apply_filters(doctors, SearchFilters()) == doctors


class TestIdentity:
    """Blank query and no filters returns the input unchanged."""

    def test_empty_query_no_filters(self, doctors):
        result = search_doctors(doctors, "")

        assert result == doctors
        assert all(a is b for a, b in zip(result, doctors))

    @pytest.mark.parametrize("query", [None, "   "])
    def test_blank_query(self, doctors, query):
        assert search_doctors(doctors, query) == doctors

    def test_does_not_return_input_list_object(self, doctors):
        assert search_doctors(doctors) is not doctors


class TestFilterOptions:
    """Distinct values observed in the current base set."""

    def test_distinct_values_all_records(self, doctors):
        options = distinct_filter_values(doctors)

        assert options.cities == ["Dallas", "Denton"]
        assert options.specialties == ["Cardiology", "Dermatology", "Family Medicine"]
        assert options.insurances == ["Aetna", "BlueCross", "Cigna", "Humana", "UnitedHealthcare"]

    def test_distinct_values_for_dallas_only(self, doctors):
        dallas = apply_filters(doctors, SearchFilters(city="Dallas"))

        options = distinct_filter_values(dallas)

        assert options.cities == ["Dallas"]
        assert options.specialties == ["Cardiology", "Dermatology"]
        assert options.insurances == ["Aetna", "Cigna", "UnitedHealthcare"]

    def test_empty_records(self):
        options = distinct_filter_values([])

        assert (options.insurances, options.cities, options.specialties) == ([], [], [])


class TestRunSearch:
    """Combined result used by the API."""

    def test_spaced_query_is_not_trimmed(self, doctors):
        result = run_search(doctors, " lopez")

        assert result.total == 0

    def test_options_ignore_query_text(self, doctors):
        filters = SearchFilters(city="Dallas")

        narrow = run_search(doctors, "cigna", filters)
        broad = run_search(doctors, "", filters)

        assert ids(narrow.doctors) == ["doc-1"]
        assert narrow.filter_options == broad.filter_options

    def test_limit_keeps_total(self, doctors):
        result = run_search(doctors, "", None, limit=2)

        assert len(result.doctors) == 2
        assert result.total == 4


class TestMalformedRecords:

    def test_none_record_raises(self, doctors):
        with pytest.raises(RecordShapeError) as exc_info:
            search_doctors([doctors[0], None], "cigna")

        assert exc_info.value.field == "records[1]"

    def test_none_record_raises_for_options(self):
        with pytest.raises(RecordShapeError):
            distinct_filter_values([None])
