"""
Health validators used by ``dotctl doctor``.

Each module exposes functions returning ``CheckResult`` or
``CheckReport`` values. Validators never raise for what they find;
problems become error or warning results.
"""
