"""Product and gun lookups used to label duty assignments."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from dutydesk.domain.daily_duty import DailyDuty


class Product(BaseModel):
    """Fuel product sold at the station."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(..., description="Product ID")
    product_name: str = Field(
        default="",
        validation_alias=AliasChoices("product_name", "productName", "name"),
        description="Display name",
    )


class Gun(BaseModel):
    """Dispensing gun on a pump."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(..., description="Gun ID")
    name: str = Field(default="", validation_alias=AliasChoices("name", "guns", "gunName"), description="Display name")
    product_name: str = Field(
        default="",
        validation_alias=AliasChoices("product_name", "productName"),
        description="Product this gun dispenses",
    )


class Catalog:
    """Resolves product and gun IDs to display names, falling back to the raw ID."""

    def __init__(self, *, products: list[Product] | None = None, guns: list[Gun] | None = None) -> None:
        self._products = {product.id: product for product in products or []}
        self._guns = {gun.id: gun for gun in guns or []}

    def product_name(self, product_id: str | None) -> str:
        if not product_id:
            return ""
        product = self._products.get(product_id)
        return product.product_name if product and product.product_name else product_id

    def gun_name(self, gun_id: str | None) -> str:
        if not gun_id:
            return ""
        gun = self._guns.get(gun_id)
        return gun.name if gun and gun.name else gun_id

    def describe_assignments(self, duty: DailyDuty) -> list[tuple[str, str]]:
        """(product name, gun name) for each pair on the duty, in order."""
        return [(self.product_name(a.product_id), self.gun_name(a.gun_id)) for a in duty.assignments]
