from schemas.content_type import ContentTypeDeclaration
from schemas.field_definition import field


class CategoryType(ContentTypeDeclaration):
    name = "Category"
    slug = "categories"
    kind = "taxonomy"
    icon = "folder"
    description = "Flat topic list for grouping content"

    fields = [
        field("name", "string", required=True),
        field("description", "text"),
    ]
