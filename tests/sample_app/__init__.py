"""A small host application used as the subject of the scaffolder's tests."""
