"""Package entry point for ``python -m dictation_pad``.

WHY: Users run the pad tools as ``python -m dictation_pad replay batches.jsonl``
or ``python -m dictation_pad serve`` without installing the console script.

HOW: Delegates to the CLI's main() function.

RULES:
- This file must exist for ``python -m dictation_pad`` to work
- All argument handling lives in dictation_pad.cli
"""

if __name__ == "__main__":
    from dictation_pad.cli import main
    main()
