class ScoringError(Exception):
    """Base class for failures inside the applicant scoring job."""


class SchemaNotFoundError(ScoringError):
    """The tenant has no questions, so there is nothing to score against."""

    def __init__(self, tenant_id):
        super().__init__(f"no questionnaire found for tenant {tenant_id}")
        self.tenant_id = tenant_id


class OracleError(ScoringError):
    """A rubric scoring call failed (network, HTTP status, timeout or unparseable reply)."""
