from url_metadata.cli import main

raise SystemExit(main())
