"""Create request validation rules.

Cross-field checks on ``CreateProductRequest`` that the field-level model
validation cannot express. Rules run in a fixed order; each yields
``Violation`` entries carrying the dotted path of the offending field.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from shopcatalog.domain.exceptions import CreateRequestInvalidError, InvalidIdentifierError
from shopcatalog.domain.identifiers import ResourceKind, to_global
from shopcatalog.domain.models import CreateProductRequest, FileSet


@dataclass(frozen=True)
class Violation:
    """A failed validation rule."""

    rule: str
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


Rule = Callable[[CreateProductRequest], Iterator[Violation]]


def options_declared(request: CreateProductRequest) -> Iterator[Violation]:
    """Variants need at least one declared option group."""
    if request.variants and not request.options:
        yield Violation(
            rule="options_declared",
            path="variants",
            message="variants require at least one product option",
        )


def option_values_distinct(request: CreateProductRequest) -> Iterator[Violation]:
    """Option group names and the values within a group are unique."""
    seen_names: set[str] = set()
    for i, option in enumerate(request.options):
        if option.name in seen_names:
            yield Violation(
                rule="option_values_distinct",
                path=f"options.{i}.name",
                message=f"option {option.name!r} is declared twice",
            )
        seen_names.add(option.name)

        seen_values: set[str] = set()
        for j, value in enumerate(option.values):
            if value.name in seen_values:
                yield Violation(
                    rule="option_values_distinct",
                    path=f"options.{i}.values.{j}",
                    message=f"value {value.name!r} is repeated in option {option.name!r}",
                )
            seen_values.add(value.name)


def option_values_resolve(request: CreateProductRequest) -> Iterator[Violation]:
    """Every variant option value refers to a declared option and value."""
    if not request.options:
        # Reported by options_declared
        return
    declared = {o.name: {v.name for v in o.values} for o in request.options}
    for i, variant in enumerate(request.variants):
        for j, ref in enumerate(variant.option_values):
            path = f"variants.{i}.option_values.{j}"
            if ref.option_name not in declared:
                yield Violation(
                    rule="option_values_resolve",
                    path=path,
                    message=f"option {ref.option_name!r} is not declared",
                )
            elif ref.name not in declared[ref.option_name]:
                yield Violation(
                    rule="option_values_resolve",
                    path=path,
                    message=f"value {ref.name!r} is not declared for option {ref.option_name!r}",
                )


def _file_gid(file: FileSet) -> str:
    return to_global(file.id, ResourceKind.for_file(file.content_type.value))


def variant_files_listed(request: CreateProductRequest) -> Iterator[Violation]:
    """A file attached to a variant must also be in the product's files.

    File ids are compared as global ids, so ``5`` and
    ``gid://shopify/MediaImage/5`` name the same file.
    """
    ids: set[str] = set()
    for j, file in enumerate(request.files):
        if not file.id:
            continue
        try:
            ids.add(_file_gid(file))
        except InvalidIdentifierError as e:
            yield Violation(
                rule="variant_files_listed",
                path=f"files.{j}.id",
                message=e.message,
            )
    sources = {f.original_source for f in request.files if f.original_source}

    for i, variant in enumerate(request.variants):
        file = variant.file
        if file is None:
            continue
        listed = bool(file.original_source and file.original_source in sources)
        if file.id and not listed:
            try:
                listed = _file_gid(file) in ids
            except InvalidIdentifierError as e:
                yield Violation(
                    rule="variant_files_listed",
                    path=f"variants.{i}.file.id",
                    message=e.message,
                )
                continue
        if not listed:
            yield Violation(
                rule="variant_files_listed",
                path=f"variants.{i}.file",
                message="variant file must also be listed in the product files",
            )


def inventory_tracked(request: CreateProductRequest) -> Iterator[Violation]:
    """Inventory quantities require inventory tracking."""
    for i, variant in enumerate(request.variants):
        if variant.inventory_quantities and not (
            variant.inventory_item and variant.inventory_item.tracked
        ):
            yield Violation(
                rule="inventory_tracked",
                path=f"variants.{i}.inventory_item.tracked",
                message="inventory_quantities require inventory_item.tracked",
            )


def location_ids_valid(request: CreateProductRequest) -> Iterator[Violation]:
    """Inventory location ids are numeric or Location global ids."""
    for i, variant in enumerate(request.variants):
        for j, quantity in enumerate(variant.inventory_quantities or []):
            try:
                to_global(quantity.location_id, ResourceKind.LOCATION)
            except InvalidIdentifierError as e:
                yield Violation(
                    rule="location_ids_valid",
                    path=f"variants.{i}.inventory_quantities.{j}.location_id",
                    message=e.message,
                )


def variant_combinations_unique(request: CreateProductRequest) -> Iterator[Violation]:
    """No two variants share the same option value combination."""
    seen: dict[tuple[tuple[str, str], ...], int] = {}
    for i, variant in enumerate(request.variants):
        key = tuple(sorted((ref.option_name, ref.name) for ref in variant.option_values))
        if key in seen:
            yield Violation(
                rule="variant_combinations_unique",
                path=f"variants.{i}.option_values",
                message=f"duplicates the option combination of variant {seen[key]}",
            )
        else:
            seen[key] = i


CREATE_PRODUCT_RULES: tuple[Rule, ...] = (
    options_declared,
    option_values_distinct,
    option_values_resolve,
    variant_files_listed,
    inventory_tracked,
    location_ids_valid,
    variant_combinations_unique,
)


def validate_create_request(request: CreateProductRequest) -> list[Violation]:
    """Run every rule and collect violations in rule order."""
    violations: list[Violation] = []
    for rule in CREATE_PRODUCT_RULES:
        violations.extend(rule(request))
    return violations


def ensure_valid_create_request(request: CreateProductRequest) -> None:
    """Validate a create request.

    Raises:
        CreateRequestInvalidError: If any rule reports a violation.
    """
    violations = validate_create_request(request)
    if violations:
        raise CreateRequestInvalidError(violations)
