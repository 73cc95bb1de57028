# main.py

from auditor_tools.main import main

if __name__ == '__main__':
    # Lets `python main.py gui` work from a source checkout.
    main()
