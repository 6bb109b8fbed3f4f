"""Run the tileboard dashboard: ``python src/main.py``."""
from tileboard.main import main

if __name__ == "__main__":
    main()
