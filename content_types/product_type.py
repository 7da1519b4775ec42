from schemas.content_type import ContentTypeDeclaration
from schemas.field_definition import field


class ProductType(ContentTypeDeclaration):
    name = "Product"
    slug = "products"
    icon = "shopping-cart"

    archive = "/shop"
    single = "/shop/:slug"

    fields = [
        field("name", "string", required=True),
        field("description", "text"),
        field("price", "decimal", precision=10, scale=2, required=True),
        field("compare_at_price", "decimal", precision=10, scale=2),
        field("sku", "string", unique=True, required=True),
        field("stock_quantity", "integer", default=0),
        field("weight", "decimal"),
        field("dimensions", "json"),
        field("product_images", "images", multiple=True),
        field("vendor", "belongs_to", model_class="vendors"),
        field("vendor_ids", "reference", model_class="vendors", label="Vendors"),
        field("categories", "has_many", through="product_categories"),
        field(
            "specifications",
            "repeater",
            fields=[
                field("label", "string", required=True),
                field("value", "string"),
            ],
        ),
    ]
