from metrics_app.server import main

if __name__ == "__main__":
    main()
