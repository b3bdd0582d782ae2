from .page_tree import DEFAULT_PAGE_TITLE, PageSkeleton, PageTree, TreePage

__all__ = ["DEFAULT_PAGE_TITLE", "PageSkeleton", "PageTree", "TreePage"]
