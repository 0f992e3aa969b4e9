"""
Service layer abstraction.

``dataset_repository`` stores named JSON blobs; ``product_service`` and
``sales_service`` implement the catalog and ledger rules on top of it;
``organisation_service`` maps users to the organisation that owns the
datasets.  Services raise ``core.errors`` exceptions and never build
HTTP responses.
"""
