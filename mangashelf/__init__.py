"""Backend package for the manga library, blog and activity log."""
