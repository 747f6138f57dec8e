"""Allow running as ``python -m terraform_ai``."""

from terraform_ai.cli import main

if __name__ == "__main__":
    main()
