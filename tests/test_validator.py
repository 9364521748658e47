"""End-to-end tests for TimelinessValidator and TimelinessSchema."""

from datetime import date, datetime, time, timedelta

import pytest

from dataknobs_timeliness import (
    ConfigurationError,
    Errors,
    Record,
    TemporalParser,
    TimelinessSchema,
    TimelinessValidator,
    validates_date,
    validates_datetime,
    validates_time,
    validates_timeliness_of,
)

NOW = datetime(2008, 1, 1, 12, 0, 0)


def basic_schema():
    return (
        TimelinessSchema("basic")
        .datetime("birth_date_and_time", allow_blank=True)
        .date("birth_date", allow_blank=True)
        .time("birth_time", allow_blank=True)
    )


class TestNoRestrictions:
    """Test value validity without restrictions."""

    def test_invalid_date_component_for_datetime(self, person):
        person["birth_date_and_time"] = "1980-02-30 01:02:03"
        result = basic_schema().validate(person)
        assert not result.valid
        assert person.errors.on("birth_date_and_time") == "is not a valid datetime"
        assert result.violations[0].key == "invalid_datetime"
        assert result.violations[0].parameter == "datetime"

    def test_invalid_time_component_for_datetime(self, person):
        person["birth_date_and_time"] = "1980-02-30 25:02:03"
        basic_schema().validate(person)
        assert person.errors.on("birth_date_and_time") == "is not a valid datetime"

    def test_invalid_date(self, person):
        person["birth_date"] = "1980-02-30"
        basic_schema().validate(person)
        assert person.errors.on("birth_date") == "is not a valid date"

    def test_invalid_time(self, person):
        person["birth_time"] = "25:00"
        basic_schema().validate(person)
        assert person.errors.on("birth_time") == "is not a valid time"

    def test_invalid_value_is_cleared(self, person):
        person["birth_date"] = "1980-02-30"
        basic_schema().validate(person)
        assert person["birth_date"] is None

    def test_valid_values(self, person):
        person["birth_date_and_time"] = "1980-01-31 12:12:12"
        person["birth_date"] = "1980-01-31"
        result = basic_schema().validate(person)
        assert result.valid
        assert person.is_valid()

    def test_values_before_epoch(self, person):
        person["birth_date_and_time"] = "1960-01-31 12:12:12"
        person["birth_date"] = "1960-01-31"
        person["birth_time"] = "23:59"
        assert basic_schema().validate(person).valid

    def test_nil_values_allowed_when_blank_allowed(self, person):
        person["birth_date_and_time"] = None
        person["birth_date"] = None
        person["birth_time"] = None
        assert basic_schema().validate(person).valid

    def test_blank_not_allowed(self, person):
        validator = validates_date("birth_date")
        person["birth_date"] = "   "
        result = validator.validate(person)
        assert person.errors.on("birth_date") == "can't be blank"
        assert result.errors == ["Birth date can't be blank"]

    def test_nil_allowed_but_not_blank(self, person):
        validator = validates_date("birth_date", allow_nil=True)
        assert validator.validate(Record({"birth_date": None})).valid
        assert not validator.validate(Record({"birth_date": ""})).valid


class TestDatetimeRestrictions:
    """Test datetime values against before/after restrictions."""

    @pytest.fixture
    def before_after(self):
        return validates_datetime(
            "birth_date_and_time", before=NOW, after=NOW - timedelta(days=1)
        )

    @pytest.fixture
    def on_or_before_after(self):
        midnight = NOW.replace(hour=0, minute=0, second=0)
        return validates_datetime(
            "birth_date_and_time", on_or_before=midnight, on_or_after=NOW - timedelta(days=1)
        )

    def check(self, validator, value):
        person = Record({"birth_date_and_time": value})
        validator.validate(person)
        return person.errors.on("birth_date_and_time")

    def test_past_before(self, before_after):
        assert "must be before" in self.check(before_after, NOW + timedelta(minutes=1))

    def test_before_after(self, before_after):
        assert "must be after" in self.check(before_after, NOW - timedelta(days=2))

    def test_on_boundary_of_before(self, before_after):
        assert self.check(before_after, NOW) == "must be before 2008-01-01 12:00:00"

    def test_on_boundary_of_after(self, before_after):
        assert "must be after" in self.check(before_after, NOW - timedelta(days=1))

    def test_past_on_or_before(self, on_or_before_after):
        value = NOW.replace(hour=0) + timedelta(seconds=1)
        assert "must be on or before" in self.check(on_or_before_after, value)

    def test_before_on_or_after(self, on_or_before_after):
        value = NOW - timedelta(days=1, seconds=1)
        assert "must be on or after" in self.check(on_or_before_after, value)

    def test_equal_to_on_or_before(self, on_or_before_after):
        assert self.check(on_or_before_after, NOW.replace(hour=0)) is None

    def test_equal_to_on_or_after(self, on_or_before_after):
        assert self.check(on_or_before_after, NOW - timedelta(days=1)) is None


class TestDateRestrictions:
    """Test date values against restrictions."""

    @pytest.fixture
    def validator(self):
        return validates_date(
            "birth_date",
            on_or_before=NOW + timedelta(days=1),
            on_or_after=NOW - timedelta(days=1),
        )

    def test_past_on_or_before(self, validator):
        person = Record({"birth_date": (NOW + timedelta(days=2)).date()})
        validator.validate(person)
        assert person.errors.on("birth_date") == "must be on or before 2008-01-02"

    def test_before_on_or_after(self, validator):
        person = Record({"birth_date": "2007-12-30"})
        validator.validate(person)
        assert person.errors.on("birth_date") == "must be on or after 2007-12-31"

    def test_on_boundaries(self, validator):
        assert validator.validate(Record({"birth_date": "2008-01-02"})).valid
        assert validator.validate(Record({"birth_date": "2007-12-31"})).valid

    def test_before_and_after(self):
        validator = validates_date(
            "birth_date", before=NOW + timedelta(days=1), after=NOW - timedelta(days=1)
        )
        assert not validator.validate(Record({"birth_date": "2008-01-03"})).valid
        assert not validator.validate(Record({"birth_date": "2007-12-30"})).valid
        assert validator.validate(Record({"birth_date": "2008-01-01"})).valid


class TestTimeRestrictions:
    """Test time values against text restrictions."""

    @pytest.fixture
    def before_after(self):
        return validates_time("birth_time", before="23:00", after="06:00")

    @pytest.fixture
    def on_or_before_after(self):
        return validates_time("birth_time", on_or_before="23:00", on_or_after="06:00")

    @pytest.mark.parametrize("value,message", [
        ("23:00", "must be before 23:00:00"),
        ("06:00am", "must be after 06:00:00"),
        ("23:01", "must be before 23:00:00"),
        ("05:59", "must be after 06:00:00"),
        ("22:59", None),
        ("06:01", None),
    ])
    def test_before_after(self, before_after, value, message):
        person = Record({"birth_time": value})
        before_after.validate(person)
        assert person.errors.on("birth_time") == message

    @pytest.mark.parametrize("value,message", [
        ("23:01", "must be on or before 23:00:00"),
        ("05:59", "must be on or after 06:00:00"),
        ("23:00", None),
        ("06:00", None),
    ])
    def test_on_or_before_after(self, on_or_before_after, value, message):
        person = Record({"birth_time": value})
        on_or_before_after.validate(person)
        assert person.errors.on("birth_time") == message

    def test_native_time_value(self, before_after):
        assert before_after.validate(Record({"birth_time": time(12, 0)})).valid


class TestMixedRestrictions:
    """Test mixed value and restriction types."""

    @pytest.fixture
    def schema(self):
        return (
            TimelinessSchema("mixed")
            .datetime(
                "birth_date_and_time",
                before=date(2008, 1, 2),
                after=lambda record: datetime(2008, 1, 1),
            )
            .date(
                "birth_date",
                on_or_before=datetime(2008, 1, 2),
                on_or_after=":birth_date_and_time",
            )
        )

    def test_datetime_with_date_restriction(self, schema):
        person = Record({"birth_date_and_time": "2008-01-03 00:00:00"})
        schema.validate(person)
        assert "must be before" in person.errors.on("birth_date_and_time")

    def test_callable_restriction(self, schema):
        person = Record({"birth_date_and_time": "2008-01-01 00:00:00"})
        schema.validate(person)
        assert "must be after" in person.errors.on("birth_date_and_time")

    def test_date_with_datetime_restriction(self, schema):
        person = Record({"birth_date": "2008-01-03"})
        schema.validate(person)
        assert "must be on or before" in person.errors.on("birth_date")

    def test_date_with_field_restriction(self, schema):
        person = Record({"birth_date": "2008-01-01", "birth_date_and_time": "2008-01-02 12:00:00"})
        result = schema.validate(person)
        assert person.errors.on("birth_date") == "must be on or after 2008-01-02"
        assert result.errors_on("birth_date") == ["must be on or after 2008-01-02"]

    def test_field_restriction_uses_pending_value(self, schema):
        person = Record({"birth_date": "2008-01-01", "birth_date_and_time": "2007-12-31 12:00:00"})
        person.commit()
        person["birth_date_and_time"] = "2008-01-02 12:00:00"
        schema.validate(person)
        assert "must be on or after" in person.errors.on("birth_date")


class TestValidatorOptions:
    """Test validator construction and options."""

    def test_kind_defaults_to_datetime(self):
        assert validates_timeliness_of("starts_at").kind.value == "datetime"

    def test_message_option(self):
        validator = validates_date("birth_date", invalid_datetime_message="isn't a real {value}")
        person = Record({"birth_date": "1980-02-30"})
        validator.validate(person)
        assert person.errors.on("birth_date") == "isn't a real date"

    def test_unknown_option(self):
        with pytest.raises(ConfigurationError):
            TimelinessValidator("birth_date", during="06:00")

    def test_attributes_required(self):
        with pytest.raises(ConfigurationError):
            TimelinessValidator()

    def test_unknown_kind(self):
        with pytest.raises(ConfigurationError):
            TimelinessValidator("birth_date", kind="week")

    def test_multiple_attributes(self):
        validator = validates_time("opens_at", "closes_at", after="06:00")
        person = Record({"opens_at": "05:00", "closes_at": "07:00"})
        result = validator.validate(person)
        assert [v.attribute for v in result.violations] == ["opens_at"]

    def test_explicit_error_sink(self):
        errors = Errors()
        validator = validates_date("birth_date")
        validator.validate(Record({"birth_date": "nope"}), errors)
        assert errors.on("birth_date") == "is not a valid date"

    def test_duck_typed_error_sink(self):
        """Test any object with add_violation receives violations."""

        class MessageLog:
            def __init__(self):
                self.entries = []

            def add_violation(self, violation):
                self.entries.append((violation.attribute, violation.message))

        log = MessageLog()
        person = Record({"birth_date": "nope"})
        validates_date("birth_date").validate(person, log)
        assert log.entries == [("birth_date", "is not a valid date")]
        assert person.errors.is_empty()

    def test_record_with_duck_typed_errors(self):
        """Test a host record exposing its own sink as ``errors``."""

        class Collected(list):
            def add_violation(self, violation):
                self.append(violation.key)

        person = Record({"birth_date": "2008-01-03"})
        person.errors = Collected()
        validates_date("birth_date", before="2008-01-02").validate(person)
        assert person.errors == ["before"]

    def test_error_sink_without_add_violation(self):
        with pytest.raises(ConfigurationError):
            validates_date("birth_date").validate(Record({"birth_date": "nope"}), errors=[])

    def test_custom_parser(self):
        class TodayParser(TemporalParser):
            def resolve(self, raw_value, kind, strict=True):
                if raw_value == "today":
                    return datetime(2008, 1, 1)
                return super().resolve(raw_value, kind, strict)

        validator = validates_date("birth_date", parser=TodayParser(), before="today")
        person = Record({"birth_date": "today"})
        validator.validate(person)
        assert person.errors.on("birth_date") == "must be before 2008-01-01"

    def test_raising_parser_reports_invalid(self):
        class BrokenParser(TemporalParser):
            def resolve(self, raw_value, kind, strict=True):
                raise RuntimeError("boom")

        person = Record({"birth_date": "2008-01-01"})
        validates_date("birth_date", parser=BrokenParser()).validate(person)
        assert person.errors.on("birth_date") == "is not a valid date"


class TestTimelinessSchema:
    """Test the fluent schema."""

    def test_collects_all_violations(self):
        schema = TimelinessSchema("person").date("a").date("b")
        result = schema.validate(Record({"a": "bad", "b": "worse"}))
        assert [v.attribute for v in result.violations] == ["a", "b"]
        assert result.errors == ["A is not a valid date", "B is not a valid date"]

    def test_validate_many(self):
        schema = TimelinessSchema("person").date("birth_date")
        records = [Record({"birth_date": "bad"}), Record({"birth_date": "2008-01-01"})]
        assert [r.valid for r in schema.validate_many(records)] == [False, True]
        assert len(schema.validate_many(records, stop_on_error=True)) == 1

    def test_to_dict(self):
        schema = TimelinessSchema("person").with_description("People").time("t", before="23:00")
        data = schema.to_dict()
        assert data["name"] == "person"
        assert data["description"] == "People"
        assert data["validators"][0]["kind"] == "time"
        assert "before" in data["validators"][0]["restrictions"]
