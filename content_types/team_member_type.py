from schemas.content_type import ContentTypeDeclaration
from schemas.field_definition import field


class TeamMemberType(ContentTypeDeclaration):
    name = "Team Member"
    slug = "team"

    archive = "/team"
    single = "/team/:slug"

    fields = [
        field("name", "string", required=True),
        field("role", "string", required=True),
        field("bio", "text"),
        field("photo", "image"),
        field("email", "string"),
        field("linkedin_url", "string", label="LinkedIn URL"),
        field("twitter_handle", "string"),
        field("joined_on", "date"),
        field("display_order", "integer", default=0),
    ]
