from schemas.content_type import ContentTypeDeclaration
from schemas.field_definition import field


class FaqType(ContentTypeDeclaration):
    name = "FAQ"
    slug = "faqs"

    # Listed on the help page only, no single view
    archive = "/help/faqs"

    fields = [
        field("question", "string", required=True),
        field("answer", "text", required=True),
        field("category", "select", choices=["General", "Billing", "Technical"]),
        field("display_order", "integer", default=0),
    ]
