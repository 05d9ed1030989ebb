"""
Grand Chronicler Client

This is the main entry point for the Grand Chronicler command-line client.
It wires the API gateway, the session store and the services together and
exposes them as subcommands for browsing, authoring and account management.

Version: 1.0
"""

import sys
import argparse
import logging
from typing import List, Optional

from config.validators import validate_settings, get_config_summary
from data.models import Article, ArticleStatus
from data.session_store import SessionStore
from services.api_gateway import ApiGateway
from services.article_service import ArticleService
from services.auth_service import AuthService
from services.draft import ArticleDraft
from services.listing_service import ArticleListing
from services.profile_service import ProfileService
from services.protocols import RemoteGateway
from services.search_service import ArticleSearch
from services.submission_service import SubmissionService
from services.ui_state import Phase, UiState
from utils.exceptions import ChroniclerError, ConfigurationError
from utils.helpers import truncate_text
from utils.logger import get_logger, setup_file_logging

# Set up logging
logger = get_logger(__name__)


class ChroniclerClient:
    """
    Composition root for the client.

    Builds one gateway and one session store and hands them to every
    service. Any collaborator can be injected, which is how the tests
    swap in fakes.
    """

    def __init__(self, gateway: Optional[RemoteGateway] = None, session=None, encoder=None,
                 validate: bool = True):
        """Initialize the client and its services."""
        if validate:
            validate_settings()

        self.gateway = gateway or ApiGateway()
        self.session = session or SessionStore()

        self.auth = AuthService(self.gateway, self.session)
        self.articles = ArticleService(self.gateway)
        self.listing = ArticleListing(self.gateway)
        self.search = ArticleSearch(self.gateway)
        self.submission = SubmissionService(self.gateway, self.session, encoder=encoder)
        self.profile = ProfileService(self.gateway, self.session, article_service=self.articles)

    def new_draft(self) -> ArticleDraft:
        """Start an insert-flow draft, loading categories for the picker."""
        if not self.articles.categories:
            self.articles.load_categories()
        return ArticleDraft()


# =============================================================================
# Output helpers
# =============================================================================

def _print_articles(articles: List[Article]) -> None:
    for article in articles:
        status = "" if article.status is ArticleStatus.PUBLISHED else f" [{article.status.value}]"
        print(f"{article.article_id:>6}  {truncate_text(article.title, 60)}{status}"
              f"  ({article.category_name or '-'}, {article.author_name or '-'})")


def _print_article(article: Article) -> None:
    print(article.title)
    print(f"Category: {article.category_name or '-'}  Author: {article.author_name or '-'}  "
          f"Views: {article.view_count}  Status: {article.status.value}")
    if article.published_at:
        print(f"Published: {article.published_at:%Y-%m-%d %H:%M}")
    if article.tags:
        print(f"Tags: {article.tags}")
    for image in article.images:
        print(f"Image: {image}")
    print()
    print(article.content)


def _report(state: UiState) -> int:
    """Log a final state and turn it into an exit code."""
    if state.is_success or state.phase is Phase.DELETED:
        if state.message:
            logger.info(state.message)
        return 0
    logger.error(state.message or "Operation failed")
    return 1


# =============================================================================
# Commands
# =============================================================================

def _apply_draft_arguments(client: ChroniclerClient, draft: ArticleDraft, args) -> Optional[str]:
    """Copy CLI arguments onto a draft. Returns an error message on a bad category."""
    if args.title is not None:
        draft.update_field("title", args.title)
    if args.content is not None:
        draft.update_field("content", args.content)
    if args.tags is not None:
        draft.update_field("tags", args.tags)
    if args.category is not None:
        category = client.articles.find_category(args.category)
        if category is None:
            return f"Unknown category: {args.category}"
        draft.update_field("selected_category", category)

    for ref in args.delete_image or []:
        draft.remove_persisted_image(ref)

    images = args.image or []
    start = len(draft.new_images)
    draft.add_new_images(images)
    # Captions pair with --image by position, so repeated files keep their own caption
    for offset, (handle, caption) in enumerate(zip(images, args.caption or [])):
        draft.set_caption(handle, caption, index=start + offset)
    return None


def cmd_login(client: ChroniclerClient, args) -> int:
    return _report(client.auth.login(args.email, args.password))


def cmd_register(client: ChroniclerClient, args) -> int:
    return _report(client.auth.register(args.full_name, args.email, args.password))


def cmd_logout(client: ChroniclerClient, args) -> int:
    client.auth.logout()
    return 0


def cmd_whoami(client: ChroniclerClient, args) -> int:
    state = client.profile.load_profile()
    if state.is_success:
        user = state.data.user
        print(f"{user.full_name} <{user.email}> (id {user.user_id})")
        if user.bio:
            print(user.bio)
        _print_articles(state.data.articles)
    return _report(state)


def cmd_list(client: ChroniclerClient, args) -> int:
    listing = client.listing
    listing.start()
    pages = 1
    while pages < args.pages and listing.listing.has_more and listing.state.value.is_success:
        if not listing.on_scrolled(len(listing.items) - 1):
            break
        pages += 1

    state = listing.state.value
    if state.is_success:
        _print_articles(listing.items)
        if listing.last_error:
            logger.warning(f"Stopped early: {listing.last_error}")
    return _report(state)


def cmd_search(client: ChroniclerClient, args) -> int:
    client.search.update_query(args.query)
    state = client.search.state.value
    if state.is_success:
        _print_articles(state.data)
    return _report(state)


def cmd_show(client: ChroniclerClient, args) -> int:
    state = client.articles.load_detail(args.article_id)
    if state.is_success:
        _print_article(state.data)
    return _report(state)


def cmd_post(client: ChroniclerClient, args) -> int:
    draft = client.new_draft()
    error = _apply_draft_arguments(client, draft, args)
    if error:
        logger.error(error)
        return 1
    status = ArticleStatus.DRAFT if args.draft else ArticleStatus.PUBLISHED
    return _report(client.submission.submit(draft, status))


def cmd_edit(client: ChroniclerClient, args) -> int:
    draft, state = client.articles.begin_edit(args.article_id)
    if draft is None:
        return _report(state)

    error = _apply_draft_arguments(client, draft, args)
    if error:
        logger.error(error)
        return 1

    if not draft.has_changes() and not args.draft and not args.publish:
        logger.info("Nothing to update")
        return 0

    if args.draft:
        status = ArticleStatus.DRAFT
    elif args.publish:
        status = ArticleStatus.PUBLISHED
    else:
        status = state.data.status
    return _report(client.submission.submit(draft, status, article_id=args.article_id))


def cmd_delete(client: ChroniclerClient, args) -> int:
    ok, message = client.articles.delete_article(args.article_id)
    if ok:
        logger.info(message)
        return 0
    logger.error(message)
    return 1


def cmd_delete_account(client: ChroniclerClient, args) -> int:
    if not args.yes:
        logger.error("Refusing to delete the account without --yes")
        return 1
    return _report(client.profile.delete_account())


def _add_draft_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--title', type=str, help='Article title')
    parser.add_argument('--content', type=str, help='Article body')
    parser.add_argument('--category', type=str, help='Category id or name')
    parser.add_argument('--tags', type=str, help='Comma-separated tags')
    parser.add_argument('--image', action='append', help='Image file to attach (repeatable)')
    parser.add_argument('--caption', action='append', help='Caption for the matching --image (repeatable)')
    parser.add_argument('--delete-image', action='append', help='Attached image URL to remove (repeatable)')
    parser.add_argument('--draft', action='store_true', help='Save as draft instead of publishing')


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Grand Chronicler Client')
    parser.add_argument('--log-file', type=str, default='chronicler.log', help='Log file path')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='INFO', help='Logging level')
    subparsers = parser.add_subparsers(dest='command', required=True)

    p = subparsers.add_parser('login', help='Log in and remember the session')
    p.add_argument('--email', required=True)
    p.add_argument('--password', required=True)
    p.set_defaults(func=cmd_login)

    p = subparsers.add_parser('register', help='Create an account')
    p.add_argument('--full-name', required=True)
    p.add_argument('--email', required=True)
    p.add_argument('--password', required=True)
    p.set_defaults(func=cmd_register)

    p = subparsers.add_parser('logout', help='Forget the session')
    p.set_defaults(func=cmd_logout)

    p = subparsers.add_parser('whoami', help='Show the logged-in profile and its articles')
    p.set_defaults(func=cmd_whoami)

    p = subparsers.add_parser('list', help='List published articles')
    p.add_argument('--pages', type=int, default=1, help='Number of pages to load')
    p.set_defaults(func=cmd_list)

    p = subparsers.add_parser('search', help='Search articles')
    p.add_argument('query')
    p.set_defaults(func=cmd_search)

    p = subparsers.add_parser('show', help='Show one article')
    p.add_argument('article_id', type=int)
    p.set_defaults(func=cmd_show)

    p = subparsers.add_parser('post', help='Write a new article')
    _add_draft_arguments(p)
    p.set_defaults(func=cmd_post)

    p = subparsers.add_parser('edit', help='Edit an existing article')
    p.add_argument('article_id', type=int)
    _add_draft_arguments(p)
    p.add_argument('--publish', action='store_true', help='Publish the article')
    p.set_defaults(func=cmd_edit)

    p = subparsers.add_parser('delete', help='Delete an article')
    p.add_argument('article_id', type=int)
    p.set_defaults(func=cmd_delete)

    p = subparsers.add_parser('delete-account', help='Delete the logged-in account')
    p.add_argument('--yes', action='store_true', help='Confirm the deletion')
    p.set_defaults(func=cmd_delete_account)

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    # Parse command line arguments
    args = parse_arguments(argv)

    # Set up logging
    log_level = getattr(logging, args.log_level)
    setup_file_logging(args.log_file, log_level)

    logger.debug(f"Configuration: {get_config_summary()}")

    try:
        client = ChroniclerClient()
        exit_code = args.func(client, args)

    except ConfigurationError as e:
        logger.error(str(e))
        exit_code = 2
    except ChroniclerError as e:
        logger.error(f"Chronicler error: {e}", exc_info=True)
        exit_code = 1
    except Exception as e:
        logger.error(f"Unhandled exception in Chronicler client: {e}", exc_info=True)
        exit_code = 2

    logger.debug(f"Command '{args.command}' finished with exit code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
