"""Create-or-update workflow for a single import record."""

from typing import Optional
from rich.console import Console
from rich.markup import escape

from .config import ImportRecord, RowOutcome, RowResult
from .clients import MutationResult, ShopifyClient
from .clients.shopify import created_product, created_variant_id


class ProductImporter:
    """Reconciles one ImportRecord against the store.

    Mutations run in a fixed order: product, media, variant lookup, variant
    update. User errors on one step are logged and recorded but later steps
    still run. Transport errors (APIError) are not caught here; they abort
    the row and are handled by the batch runner.
    """

    def __init__(self, client: ShopifyClient, console: Optional[Console] = None):
        self.client = client
        self.console = console or Console()

    async def resolve_product_id(self, record: ImportRecord, result: RowResult) -> Optional[str]:
        """Resolve an existing product id; None means create."""
        identity = record.identity
        if identity.remote_id:
            return identity.remote_id

        if not identity.handle:
            return None

        lookup = await self.client.find_product_by_handle(identity.handle)
        if not lookup.ok:
            self._record_problem(result, "productByHandle", lookup.describe_errors())
            self.console.print("  Handle lookup failed - will create new.")
            return None

        if lookup.product:
            self.console.print(f"  Found existing product id: {lookup.product.id}")
            return lookup.product.id

        self.console.print("  No product found for handle - will create new.")
        return None

    async def import_record(self, record: ImportRecord, row_number: int = 0) -> RowResult:
        """Import one record and report what happened."""
        result = RowResult(row_number=row_number, title=record.title, outcome=RowOutcome.ERRORED)

        product_id = await self.resolve_product_id(record, result)
        if product_id:
            await self._update(record, product_id, result)
        else:
            await self._create(record, result)

        return result

    async def _update(self, record: ImportRecord, product_id: str, result: RowResult) -> None:
        self.console.print(f"  Updating product: {product_id}")
        result.product_id = product_id
        result.outcome = RowOutcome.UPDATED

        update = await self.client.update_product(product_id, record.product_input())
        if update.ok:
            handle = (update.payload.get("product") or {}).get("handle") or "unknown"
            self.console.print(f"  [green]Product updated (handle): {handle}[/green]")
        else:
            self._record_problem(result, "productUpdate", update.describe_errors())

        if record.media:
            media = await self.client.create_media(product_id, record.media_inputs())
            if media.ok:
                self.console.print("  [green]Media added for product.[/green]")
            else:
                self._record_problem(result, "productCreateMedia", media.describe_errors())

        lookup = await self.client.get_first_variant_id(product_id)
        if not lookup.ok:
            self._record_problem(result, "getFirstVariant", lookup.describe_errors())
            return
        if not lookup.variant_id:
            self.console.print("  [yellow]No variant found to update.[/yellow]")
            return

        await self._update_variant(record, product_id, lookup.variant_id, result)

    async def _create(self, record: ImportRecord, result: RowResult) -> None:
        self.console.print("  Creating product...")

        product_input = record.product_input()
        if record.identity.handle:
            product_input["handle"] = record.identity.handle

        create = await self.client.create_product(product_input, record.media_inputs())
        product = created_product(create)
        if not create.ok or product is None:
            self._record_problem(result, "productCreate", create.describe_errors() or "no product returned")
            result.error = "Product was not created"
            return

        result.product_id = product.id
        result.outcome = RowOutcome.CREATED
        self.console.print(f"  [green]Created product id: {product.id}[/green]")

        variant_id = created_variant_id(create)
        if not variant_id:
            self.console.print("  [yellow]No initial variant returned to update.[/yellow]")
            return

        await self._update_variant(record, product.id, variant_id, result)

    async def _update_variant(
        self,
        record: ImportRecord,
        product_id: str,
        variant_id: str,
        result: RowResult
    ) -> Optional[MutationResult]:
        if not record.variant.has_updates:
            return None

        variants = await self.client.bulk_update_variants(
            product_id, [record.variant.to_bulk_input(variant_id)]
        )
        if variants.ok:
            self.console.print("  [green]Variant(s) bulk-updated.[/green]")
        else:
            self._record_problem(result, "productVariantsBulkUpdate", variants.describe_errors())
        return variants

    def _record_problem(self, result: RowResult, operation: str, message: str) -> None:
        result.problems.append(f"{operation}: {message}")
        self.console.print(f"  [red]{operation} errors: {escape(message)}[/red]")
