from .submitter import TransactionSubmitter, validate_submission

__all__ = ["TransactionSubmitter", "validate_submission"]
