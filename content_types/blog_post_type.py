from schemas.content_type import ContentTypeDeclaration
from schemas.field_definition import field


class BlogPostType(ContentTypeDeclaration):
    name = "Blog Post"
    slug = "blog"
    icon = "newspaper"
    description = "Articles and blog content"

    archive = "/blog"
    single = "/blog/:slug"

    fields = [
        field("title", "string", required=True),
        field("subtitle", "string"),
        field("content", "rich_text", required=True),
        field("excerpt", "text"),
        field("reading_time", "integer", help_text="Minutes"),
        field("featured", "boolean", default=False),
        field("category", "select", choices=["Technology", "Design", "Business"]),
        field("topic", "taxonomy", taxonomy_type="categories"),
        field("tags", "array", of="string"),
        field("author", "belongs_to", model_class="users"),
        field("featured_image", "image"),
        field("related_products", "reference", model_class="products"),
    ]
