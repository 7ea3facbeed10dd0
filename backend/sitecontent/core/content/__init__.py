"""
Site content core.

    values          Html / Image value objects
    config          ContentConfig and its definition builder
    definition      Module / group / area declaration DSL and ContentSchema
    yaml_definition YAML declarations replayed through the DSL
    repository      ContentGroupRepository implementations
    schema_sync     Reconciles stored groups with the declared schema
    loader_service  Read path used by templates and the public API
    module          Editing operations per content module
    package         ContentPackage base class and boot sequence
"""
