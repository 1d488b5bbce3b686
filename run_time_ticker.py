from time_ticker.app import main

if __name__ == '__main__':
    main()
