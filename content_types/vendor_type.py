from schemas.content_type import ContentTypeDeclaration
from schemas.field_definition import field


class VendorType(ContentTypeDeclaration):
    name = "Vendor"
    slug = "vendors"
    icon = "truck"

    fields = [
        field("title", "string", required=True),
        field("website", "string"),
    ]
