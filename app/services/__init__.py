# Services package.
#
#   article_service : listing pipeline + CRUD for Article
#
# Service functions accept an ArticleRepository as their first argument
# so that the router layer controls both the backing store and, through
# the ``get_db`` dependency, the transaction boundary.
