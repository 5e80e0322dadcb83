"""
Pydantic schemas for seed files.

A seed file describes the record types, records, templates and report
summaries an in-memory repository starts with.
"""
from typing import List

from pydantic import BaseModel, Field, model_validator

from ..models import Record, RecordType, ReportSummary, Template


class SeedData(BaseModel):
    """Complete seed for an in-memory repository."""
    record_types: List[RecordType] = Field(default_factory=list)
    records: List[Record] = Field(default_factory=list)
    templates: List[Template] = Field(default_factory=list)
    reports: List[ReportSummary] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def validate_references(self) -> "SeedData":
        type_ids = {rt.id for rt in self.record_types}
        for record in self.records:
            if record.record_type_id is not None and record.record_type_id not in type_ids:
                raise ValueError(
                    f"Record '{record.name}' references unknown record type "
                    f"'{record.record_type_id}'"
                )

        record_ids = {r.id for r in self.records}
        for report in self.reports:
            if report.record_id is not None and report.record_id not in record_ids:
                raise ValueError(f"Report '{report.id}' references unknown record '{report.record_id}'")

        for label, items in (
            ("record type", self.record_types),
            ("record", self.records),
            ("template", self.templates),
            ("report", self.reports),
        ):
            seen = set()
            for item in items:
                if item.id in seen:
                    raise ValueError(f"Duplicate {label} id in seed: '{item.id}'")
                seen.add(item.id)
        return self
