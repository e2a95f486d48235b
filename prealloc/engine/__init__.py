"""Analysis engine: declaration tracking, loop matching, simple-mode filtering."""
