"""Post Handlers — render_greeting, create_post, get_post_by_id, not_found.

Invariants:
    - create_post is the only handler with a side effect (one PostStore.create call)
    - Handlers raise PostServerError subclasses; the dispatcher turns them into responses
    - A Post read from the store never outlives the request that read it
    - Absence is a 404 with empty body, never an error envelope

Design Decisions:
    - Handlers receive store/renderer through the constructor (shared, not per-request)
    - Template names are module constants: the renderer registers exactly these two
"""

import logging

from minipost.core.domain_types import IncomingRequest, Response
from minipost.core.parse_request import format_post_id, parse_form, parse_post_id
from minipost.core.protocols import PostRepository, Renderer
from minipost.schemas.post import GreetingForm, PostCreate

logger = logging.getLogger(__name__)

GREETING_TEMPLATE = "hello"
POST_TEMPLATE = "post"
POSTS_PREFIX = "/posts/"


def extract_id_segment(path: str) -> str:
    """Return the segment right after /posts/; extra segments are ignored."""
    rest = path[len(POSTS_PREFIX):] if path.startswith(POSTS_PREFIX) else ""
    return rest.split("/", 1)[0]


class PostHandlers:
    """Request handlers for the post routes."""

    def __init__(self, store: PostRepository, renderer: Renderer):
        self.store = store
        self.renderer = renderer

    async def render_greeting(self, request: IncomingRequest) -> Response:
        """GET / — greet the `name` field of the url-encoded body."""
        form = parse_form(request.body, GreetingForm)
        rendered = self.renderer.render(GREETING_TEMPLATE, {"name": form.name})
        return Response.ok(rendered)

    async def create_post(self, request: IncomingRequest) -> Response:
        """POST /posts — persist title+content, answer with the new id."""
        form = parse_form(request.body, PostCreate)
        post_id = await self.store.create(form.title, form.content)
        logger.debug("Post created", extra={"post_id": str(post_id)})
        return Response.ok(format_post_id(post_id))

    async def get_post_by_id(self, request: IncomingRequest) -> Response:
        """GET /posts/{id} — render the stored post or answer 404."""
        post_id = parse_post_id(extract_id_segment(request.path))
        post = await self.store.get_by_id(post_id)
        if post is None:
            logger.debug("Post not found", extra={"post_id": str(post_id)})
            return Response.not_found()
        rendered = self.renderer.render(POST_TEMPLATE, {
            "id": format_post_id(post.id),
            "title": post.title,
            "content": post.content,
        })
        return Response.ok(rendered)

    async def not_found(self, request: IncomingRequest) -> Response:
        return Response.not_found()
