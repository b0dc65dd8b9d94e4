from chelo.cli import main

raise SystemExit(main())
